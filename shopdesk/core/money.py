from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shopdesk.config import get_settings

_CENTS = Decimal("0.01")

# (group separator, decimal separator, currency after amount)
_LOCALE_FORMATS = {
    "fr-FR": (" ", ",", True),
    "fr-CM": (" ", ",", True),
    "en-US": (",", ".", False),
    "en-GB": (",", ".", False),
    "de-DE": (".", ",", True),
}

# Currencies without minor units in day-to-day use.
_ZERO_DECIMAL_CURRENCIES = {"XAF", "XOF", "JPY", "KRW"}


def to_decimal(value, *, field: str = "amount") -> Decimal:
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError("{} must be a decimal number".format(field)) from exc
    if not amount.is_finite():
        raise ValueError("{} must be a finite number".format(field))
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _group_digits(digits: str, separator: str) -> str:
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


def format_amount(amount, currency=None, locale=None) -> str:
    settings = get_settings()
    currency = currency or settings.CURRENCY
    locale = locale or settings.CURRENCY_LOCALE
    group_sep, decimal_sep, suffix = _LOCALE_FORMATS.get(locale, _LOCALE_FORMATS["en-US"])

    value = to_decimal(amount)
    places = 0 if currency.upper() in _ZERO_DECIMAL_CURRENCIES else 2
    value = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    whole, _, fraction = "{:f}".format(abs(value)).partition(".")
    text = _group_digits(whole, group_sep)
    if places:
        text = "{}{}{}".format(text, decimal_sep, fraction.ljust(places, "0"))

    if suffix:
        return "{}{} {}".format(sign, text, currency)
    return "{}{} {}".format(sign, currency, text)
