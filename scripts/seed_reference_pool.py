"""
Reference pool seeding script for the payment data generator.

Generates tokenized card records `{id, pan, hash_pan, card_type}` with Faker,
writes them to CSV and optionally loads them into the DynamoDB reference table
(batch_writer) or the PostgreSQL `reference_pans` table (COPY).
"""

from __future__ import annotations

import csv
import hashlib
import sys
import tempfile
import time
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import typer
from faker import Faker

from paygen.config import get_settings
from paygen.infrastructure.aws import dynamodb_table
from paygen.infrastructure.db_factory import get_sync_connection
from paygen.pipeline.reference_pool import REFERENCE_RECORDS

app = typer.Typer(help="Generate reference card records and load them into DynamoDB or Postgres.")

CSV_HEADER = ["id", "pan", "hash_pan", "card_type"]

# brand -> (display name, Faker card types, accepted PAN)
BRANDS: Dict[str, Tuple[str, Tuple[str, ...], Callable[[str], bool]]] = {
    "VISA": ("Visa", ("visa16", "visa13", "visa19"), lambda pan: pan.startswith("4") and len(pan) in (13, 16, 19)),
    "MASTERCARD": ("Mastercard", ("mastercard",), lambda pan: pan.startswith("5") and len(pan) == 16),
    "AMEX": ("American Express", ("amex",), lambda pan: pan[:2] in ("34", "37") and len(pan) == 15),
    "DISCOVER": ("Discover", ("discover",), lambda pan: pan.startswith("6") and len(pan) == 16),
    "JCB": ("JCB", ("jcb16",), lambda pan: pan.startswith("35") and len(pan) == 16),
    "DINERS": ("Diners Club", ("diners",), lambda pan: pan[:2] in ("30", "36", "38") and len(pan) == 14),
}
BRAND_ALIASES = {"AMERICAN_EXPRESS": "AMEX", "DINERS_CLUB": "DINERS", "ALL": "MIXED"}


def _resolve_brand(card_brand: str) -> str:
    brand = card_brand.strip().upper()
    brand = BRAND_ALIASES.get(brand, brand)
    if brand != "MIXED" and brand not in BRANDS:
        raise typer.BadParameter(
            f"Unsupported card brand: {card_brand}. Supported: {', '.join(BRANDS)}, MIXED"
        )
    return brand


def hash_pan(pan: str) -> str:
    return hashlib.sha256(pan.encode("ascii")).hexdigest()


def generate_pan(fake: Faker, brand: str) -> str:
    """Draw PANs until one matches the brand's prefix and length."""
    _, card_types, accepts = BRANDS[brand]
    while True:
        pan = fake.credit_card_number(card_type=fake.random_element(card_types))
        pan = pan.replace(" ", "").replace("-", "")
        if accepts(pan):
            return pan


def _generate_records(rows: int, card_brand: str, seed: int) -> Iterator[List[str]]:
    brand = _resolve_brand(card_brand)
    fake = Faker()
    Faker.seed(seed)
    names = list(BRANDS)
    for record_id in range(rows):
        record_brand = fake.random_element(names) if brand == "MIXED" else brand
        pan = generate_pan(fake, record_brand)
        yield [str(record_id), pan, hash_pan(pan), BRANDS[record_brand][0]]


def _generate_records_csv(csv_path: Path, rows: int, card_brand: str, seed: int) -> int:
    count = 0
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for record in _generate_records(rows, card_brand, seed):
            writer.writerow(record)
            count += 1
    return count


def _read_records(csv_path: Path) -> Iterator[Dict[str, str]]:
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        yield from csv.DictReader(f)


def _load_into_dynamodb(table_name: str, csv_path: Path) -> int:
    table = dynamodb_table(get_settings(), table_name)
    written = 0
    # batch_writer resends unprocessed items itself.
    with table.batch_writer(overwrite_by_pkeys=["id"]) as batch:
        for record in _read_records(csv_path):
            batch.put_item(
                Item={
                    "id": int(record["id"]),
                    "pan": record["pan"],
                    "hash_pan": record["hash_pan"],
                    "card_type": record["card_type"],
                }
            )
            written += 1
    return written


def _copy_into_db(csv_path: Path) -> int:
    with get_sync_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("TRUNCATE TABLE public.reference_pans;")
            with cur.copy(
                """
                COPY public.reference_pans (id, pan, hash_pan, card_type)
                FROM STDIN WITH (FORMAT csv, HEADER TRUE)
                """
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            conn.commit()
            cur.execute("SELECT COUNT(*) FROM public.reference_pans;")
            row = cur.fetchone()
    return int(row[0]) if row else 0


@app.command()
def main(
    rows: int = typer.Option(
        REFERENCE_RECORDS,
        "--rows",
        "-r",
        help="Number of reference records to generate.",
    ),
    card_brand: str = typer.Option(
        "MASTERCARD",
        "--card-brand",
        "-b",
        help="VISA, MASTERCARD, AMEX, DISCOVER, JCB, DINERS or MIXED.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic Faker seed.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    target: str = typer.Option(
        "none",
        "--target",
        "-t",
        help="Where to load the records: none, dynamodb or postgres.",
    ),
    table_name: Optional[str] = typer.Option(
        None,
        "--table-name",
        help="DynamoDB table (defaults to HASH_PAN_TABLE_NAME).",
    ),
) -> None:
    """
    Generate reference card records and optionally load them.
    """
    if target not in ("none", "dynamodb", "postgres"):
        raise typer.BadParameter(f"Unknown target '{target}'. Use none, dynamodb or postgres.")

    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="reference_pool_"))
        csv_path = tmpdir / "reference_pans.csv"

    typer.echo(f"Generating {rows:,} {card_brand} records -> {csv_path} (seed={seed})")
    count = _generate_records_csv(csv_path, rows=rows, card_brand=card_brand, seed=seed)
    gen_duration = time.perf_counter() - start
    typer.echo(f"CSV generation completed in {gen_duration:.2f}s ({count:,} records)")

    if target == "none":
        typer.echo("Skipping load (target=none).")
        return

    load_start = time.perf_counter()
    if target == "dynamodb":
        name = table_name or get_settings().hash_pan_table_name
        if not name:
            raise typer.BadParameter("--table-name or HASH_PAN_TABLE_NAME is required for dynamodb")
        typer.echo(f"Loading records into DynamoDB table {name} via batch_writer...")
        loaded = _load_into_dynamodb(name, csv_path)
    else:
        typer.echo("Loading CSV into Postgres via COPY...")
        loaded = _copy_into_db(csv_path)
    load_duration = time.perf_counter() - load_start

    typer.echo(f"Loaded {loaded:,} records in {load_duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
