"""
Luhn (mod 10) 체크섬

주문 번호와 출금 요청 번호의 형식 검증에 사용.
"""


def luhn_valid(number: str) -> bool:
    """Luhn 체크섬 검증

    Args:
        number: 숫자로만 이루어진 문자열

    Returns:
        비어 있지 않은 숫자 문자열이고 체크섬이 맞으면 True

    Example:
        >>> luhn_valid("79927398713")
        True
        >>> luhn_valid("79927398710")
        False
    """
    if not number or not number.isascii() or not number.isdigit():
        return False

    total = 0
    # 오른쪽 끝(체크 숫자)부터 짝수 번째 자리를 두 배
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit

    return total % 10 == 0


def normalize_order_number(raw: str) -> str:
    """주문 번호 정규화 (뒤쪽 공백/개행 제거)"""
    return raw.rstrip()
