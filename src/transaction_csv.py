import csv
import re
from typing import Dict, Iterable, Iterator, Optional, TextIO

from amount import Amount, AmountParseError
from errors import TransactionParseError
from models import CLIENT_ID_MAX, TRANSACTION_ID_MAX, AccountSummary, Transaction, TransactionType

REQUIRED_COLUMNS = ("type", "client", "tx")
_ID_PATTERN = re.compile(r"[0-9]+")
SUMMARY_COLUMNS = ["client", "available", "held", "total", "locked"]


def read_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """
    Lazily parse CSV lines with a `type, client, tx, amount` header.

    Whitespace around every field is ignored and the amount column may be
    missing or empty for dispute, resolve and chargeback rows. Any malformed
    row raises TransactionParseError.
    """
    reader = csv.DictReader(lines)
    if reader.fieldnames is None:
        return

    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]
    missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
    if missing:
        raise TransactionParseError(1, f"missing columns: {', '.join(missing)}")

    for row in reader:
        yield parse_row(row, reader.line_num)


def parse_row(row: Dict[Optional[str], Optional[str]], line_number: int) -> Transaction:
    """Parse CSV row into Transaction."""
    if None in row:
        raise TransactionParseError(line_number, f"too many fields: {row[None]!r}")

    normalized = {key: (value or "").strip() for key, value in row.items()}

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except ValueError:
        raise TransactionParseError(line_number, f"unknown transaction type {normalized['type']!r}") from None

    client_id = _parse_id(normalized["client"], CLIENT_ID_MAX, "client", line_number)
    transaction_id = _parse_id(normalized["tx"], TRANSACTION_ID_MAX, "tx", line_number)

    amount = None
    amount_str = normalized.get("amount", "")
    if transaction_type.carries_amount:
        if not amount_str:
            raise TransactionParseError(line_number, f"{transaction_type.value} requires an amount")
        try:
            amount = Amount.parse(amount_str)
        except AmountParseError as e:
            raise TransactionParseError(line_number, str(e)) from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(text: str, maximum: int, column: str, line_number: int) -> int:
    if _ID_PATTERN.fullmatch(text) is None:
        raise TransactionParseError(line_number, f"{column} must be an unsigned integer, got {text!r}")
    value = int(text)
    if value > maximum:
        raise TransactionParseError(line_number, f"{column} {value} out of range 0..{maximum}")
    return value


def write_summaries(summaries: Iterable[AccountSummary], stream: TextIO) -> None:
    """Write the account report as CSV, amounts with four decimal places."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(SUMMARY_COLUMNS)
    for summary in summaries:
        writer.writerow([
            summary.client_id,
            str(summary.available),
            str(summary.held),
            str(summary.total),
            str(summary.locked).lower(),
        ])
