import csv
import hashlib
from pathlib import Path
from time import sleep

from typer.testing import CliRunner

from paygen import config
from paygen.generation.schemas import TABLE_NAMES
from paygen.main import app
from paygen.utils import profiler
from scripts import seed_reference_pool

EXPECTED_TABLE_COUNT = 6
SEEDED_RECORDS = 5

runner = CliRunner()


def test_settings_defaults():
    settings = config.Settings()
    assert settings.num_threads > 0
    assert settings.num_of_rows > 0
    assert settings.upload_max_attempts == 3
    assert settings.reference_pool_size > 0
    assert settings.effective_dynamodb_region


def test_profile_block_measures_time():
    with profiler.profile_block("sleep") as stats:
        sleep(0.05)
        stats.rows = 10
    assert stats.duration_seconds >= 0.05
    assert stats.throughput_rows_per_sec > 0
    if stats.cpu_percent is not None:
        assert isinstance(stats.cpu_percent, float)


def test_schemas_command_lists_every_table():
    result = runner.invoke(app, ["schemas"])
    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if line.strip()]
    assert len(lines) == EXPECTED_TABLE_COUNT
    assert [line.split()[0] for line in lines] == list(TABLE_NAMES)


def test_partition_date_command_nightly():
    result = runner.invoke(app, ["partition-date", "--job-index", "0", "--nightly"])
    assert result.exit_code == 0
    assert len(result.output.strip()) == len("2024-01-01")


def test_seed_script_writes_csv(tmp_path: Path):
    csv_path = tmp_path / "reference.csv"
    count = seed_reference_pool._generate_records_csv(
        csv_path, rows=SEEDED_RECORDS, card_brand="MASTERCARD", seed=123
    )
    assert count == SEEDED_RECORDS

    with csv_path.open("r", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    # header + 5 rows
    assert len(rows) == SEEDED_RECORDS + 1
    assert rows[0] == ["id", "pan", "hash_pan", "card_type"]
    for index, (record_id, pan, hash_pan, card_type) in enumerate(rows[1:]):
        assert record_id == str(index)
        assert pan.startswith("5") and len(pan) == 16
        assert hash_pan == hashlib.sha256(pan.encode("ascii")).hexdigest()
        assert card_type == "Mastercard"


def test_seed_script_is_deterministic(tmp_path: Path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"
    seed_reference_pool._generate_records_csv(first, rows=3, card_brand="MIXED", seed=7)
    seed_reference_pool._generate_records_csv(second, rows=3, card_brand="MIXED", seed=7)
    assert first.read_text() == second.read_text()
