from decimal import Decimal, ROUND_HALF_UP

_UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten", "Eleven",
          "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen"]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
# Indian place values, largest first
_SCALES = [(10000000, "Crore"), (100000, "Lakh"), (1000, "Thousand"), (100, "Hundred")]


def format_indian_currency(amount, symbol: str = "₹") -> str:
    """Group digits the Indian way: 12,34,567.50"""
    amount = Decimal(amount or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer_part, decimal_part = f"{abs(amount):.2f}".split(".")

    if len(integer_part) > 3:
        head, last_three = integer_part[:-3], integer_part[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        integer_part = ",".join(groups + [last_three])

    return f"{sign}{symbol} {integer_part}.{decimal_part}"


def _words(num: int) -> str:
    if num < 20:
        return _UNITS[num]
    if num < 100:
        return (_TENS[num // 10] + " " + _UNITS[num % 10]).strip()
    for value, name in _SCALES:
        if num >= value:
            rest = num % value
            return _words(num // value) + " " + name + (" " + _words(rest) if rest else "")
    return ""


def amount_to_words(amount) -> str:
    """Amount in words as printed on a bill, e.g. 'Rupees One Hundred Twenty and Fifty Paise Only'."""
    amount = Decimal(amount or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    rupees = int(amount)
    paise = int((amount - rupees) * 100)

    words = "Rupees " + (_words(rupees) if rupees else "Zero")
    if paise:
        words += " and " + _words(paise) + " Paise"
    return words + " Only"
