"""
Input Validation

DESIGN DECISION: The reader is tolerant, the writer is strict.

Stored files may contain junk in the price column (hand edits, older
versions) and that junk is read as 0.00. A price typed by the user is
different: it either parses or the entry is refused. Nothing is ever
silently replaced with zero on the way in.

IMPORTANT: Validation NEVER fixes issues beyond the documented
normalization (trimming, ',' accepted as the decimal separator).
It reports them so the shell can ask again.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import ValidationError

from price_ledger.models.record import (
    Record,
    ValidationIssue,
    is_plain_number,
    quantize_price,
    utc_timestamp,
)


class RecordValidationError(ValueError):
    """User-entered data was rejected. The store was not touched."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        message = "; ".join(issue.message for issue in issues) or "Invalid record"
        super().__init__(message)

    def to_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


def _price_issue(issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        field="price",
        issue_type=issue_type,
        message=message,
        suggested_fix="Enter a number such as 4.99 or 4,99",
    )


def check_price_text(text: str) -> tuple[Optional[Decimal], list[ValidationIssue]]:
    """
    Strictly parse a price typed by the user.

    Returns (price, issues). `price` is None whenever issues is non-empty.
    """
    normalized = text.strip().replace(",", ".")

    if not normalized:
        return None, [_price_issue("missing", "Price is required")]

    if not is_plain_number(normalized):
        return None, [_price_issue("invalid_format", f"Invalid price: {text!r}")]

    try:
        value = Decimal(normalized)
    except InvalidOperation:
        return None, [_price_issue("invalid_format", f"Invalid price: {text!r}")]

    if not value.is_finite():
        return None, [_price_issue("invalid_format", f"Invalid price: {text!r}")]

    if value < 0:
        return None, [_price_issue("negative", "Price cannot be negative")]

    try:
        return quantize_price(value), []
    except InvalidOperation:
        return None, [_price_issue("out_of_range", f"Price is too large: {text!r}")]


def parse_price_text(text: str) -> Decimal:
    """
    Parse a user-entered price or raise.

    Raises:
        RecordValidationError: If the text is not a non-negative number
    """
    price, issues = check_price_text(text)
    if issues:
        raise RecordValidationError(issues)
    return price


class RecordValidator:
    """Builds Records from raw user input, collecting every problem at once."""

    def build_record(
        self,
        product: str,
        category: str,
        price_text: str,
        url: str,
        timestamp: Optional[str] = None,
    ) -> Record:
        """
        Validate the four user inputs and create a Record.

        Raises:
            RecordValidationError: With one issue per rejected field
        """
        issues = []

        if not product.strip():
            issues.append(ValidationIssue(
                field="product",
                issue_type="missing",
                message="Product name is required",
                suggested_fix="Enter the product name",
            ))

        price, price_issues = check_price_text(price_text)
        issues.extend(price_issues)

        if issues:
            raise RecordValidationError(issues)

        try:
            return Record(
                product=product,
                category=category,
                price=price,
                url=url,
                timestamp=timestamp or utc_timestamp(),
            )
        except ValidationError as e:
            raise RecordValidationError([
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]),
                    issue_type=error["type"],
                    message=error["msg"],
                )
                for error in e.errors()
            ]) from e
