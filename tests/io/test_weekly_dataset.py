import json
import os
from pathlib import Path

import pytest

from celstats.core.errors import DecodeError
from celstats.io.config import RewardsSettings
from celstats.io.dataset import WeeklyDataset, process_all
from celstats.io.errors import IoConfigError, IoReadError


def make_line(account_id: str, balance: str, usd: str = "1", tier: str = "GOLD") -> str:
    payload = {
        "BTC": {
            "interestCoin": "CEL",
            "totalInterestInCoin": "0.5",
            "totalInterestInUsd": usd,
            "earningInterestInCel": True,
            "loyaltyTier": {"title": tier},
            "distributionData": [{"newBalance": balance}],
        }
    }
    return f"{account_id},{json.dumps(payload)}"


def write_extract(data_dir: Path, key: str, lines: list[str]) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    p = data_dir / f"{key}-rewards.csv"
    p.write_text("\n".join(["id,data", *lines]) + "\n")
    return p


def make_settings(tmp_path: Path, **overrides) -> RewardsSettings:
    base = {
        "data_dir": str(tmp_path / "raw"),
        "output_dir": str(tmp_path / "out"),
        "debug_dir": str(tmp_path / "out" / "debug"),
    }
    base.update(overrides)
    return RewardsSettings(**base)


def test_process_writes_weekly_report(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    write_extract(tmp_path / "raw", "01", [make_line(f"u{i}", str(i)) for i in range(1, 6)])

    summary = WeeklyDataset(settings, "01").process()

    assert summary.rows == 5
    assert summary.coins == 2  # BTC held, CEL paid
    assert not summary.debug
    assert summary.outputs == (os.path.join(settings.output_dir, "01-rewards.json"),)
    with open(summary.outputs[0], encoding="utf-8") as fh:
        doc = json.load(fh)
    assert doc["portfolio"]["BTC"]["total"] == "15"
    assert doc["portfolio"]["CEL"]["totalInterestInCoin"] == "2.5"
    assert doc["stats"]["totalUsersEarningInCel"] == "5"
    assert doc["coinDistributions"]["BTC"][0] == ["u5", "5"]


def test_debug_run_stops_early_and_writes_debug_files(tmp_path: Path) -> None:
    settings = make_settings(tmp_path, debug_row_limit=2)
    write_extract(tmp_path / "raw", "03", [make_line(f"u{i}", "1") for i in range(10)])

    summary = WeeklyDataset(settings, "03").process(debug=True)

    assert summary.rows == 2
    assert summary.debug
    assert not os.path.exists(os.path.join(settings.output_dir, "03-rewards.json"))
    with open(os.path.join(settings.debug_dir, "debug-output.json"), encoding="utf-8") as fh:
        captured = json.load(fh)
    assert list(captured) == ["u0", "u1"]
    assert captured["u0"]["BTC"]["interestCoin"] == "CEL"
    with open(os.path.join(settings.debug_dir, "rewards-metrics.json"), encoding="utf-8") as fh:
        metrics = json.load(fh)
    assert metrics["stats"]["totalUsers"] == "2"


def test_explicit_limit_implies_debug(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    write_extract(tmp_path / "raw", "04", [make_line(f"u{i}", "1") for i in range(5)])

    summary = WeeklyDataset(settings, "04").process(limit=3)

    assert summary.debug
    assert summary.rows == 3


def test_fatal_row_writes_nothing(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    write_extract(tmp_path / "raw", "05", [make_line("u1", "1"), "u2,{not json"])

    with pytest.raises(DecodeError):
        WeeklyDataset(settings, "05").process()

    assert not os.path.exists(os.path.join(settings.output_dir, "05-rewards.json"))


def test_missing_extract(tmp_path: Path) -> None:
    with pytest.raises(IoReadError):
        WeeklyDataset(make_settings(tmp_path), "99").process()


def test_unrecognized_tiers_are_counted(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    write_extract(tmp_path / "raw", "06", [make_line("u1", "1", tier="MYSTERY"), make_line("u2", "1")])

    summary = WeeklyDataset(settings, "06").process()

    assert summary.rows == 2
    assert summary.warnings == 1


def test_process_all_handles_each_week_independently(tmp_path: Path) -> None:
    settings = make_settings(tmp_path)
    write_extract(tmp_path / "raw", "01", [make_line("u1", "1")])
    write_extract(tmp_path / "raw", "02", [make_line("u1", "2"), make_line("u2", "3")])

    summaries = process_all(settings)

    assert [s.key for s in summaries] == ["01", "02"]
    assert [s.rows for s in summaries] == [1, 2]
    with open(os.path.join(settings.output_dir, "02-rewards.json"), encoding="utf-8") as fh:
        assert json.load(fh)["stats"]["totalUsers"] == "2"


def test_process_all_without_extracts(tmp_path: Path) -> None:
    with pytest.raises(IoReadError):
        process_all(make_settings(tmp_path))


@pytest.mark.parametrize("limit", [0, -3])
def test_non_positive_limit_is_rejected(tmp_path: Path, limit: int) -> None:
    settings = make_settings(tmp_path)
    write_extract(tmp_path / "raw", "08", [make_line("u1", "1")])

    with pytest.raises(IoConfigError):
        WeeklyDataset(settings, "08").process(limit=limit)
    assert not os.path.exists(settings.debug_dir)
