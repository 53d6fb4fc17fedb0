"""
대여 요금 계산 (기간별 할인)
"""

from decimal import Decimal
from typing import Dict, Iterable, Tuple, Union

from car_rental.exceptions import InvalidInputError

Number = Union[Decimal, int, float, str]

# (최소 일수, 요금 배율) - 높은 구간부터 검사
DEFAULT_DISCOUNT_TIERS: Tuple[Tuple[int, Decimal], ...] = (
    (30, Decimal('0.80')),  # 30일 이상 20% 할인
    (7, Decimal('0.90')),   # 7일 이상 10% 할인
)

NO_DISCOUNT = Decimal('1.00')


def to_decimal(value: Number) -> Decimal:
    """숫자 값을 Decimal로 변환 (float는 문자열 경유)"""
    if isinstance(value, bool):
        raise InvalidInputError(f'숫자가 아닌 값입니다: {value!r}')
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except ArithmeticError:
        raise InvalidInputError(f'숫자가 아닌 값입니다: {value!r}')
    if not result.is_finite():
        raise InvalidInputError(f'유한한 숫자가 아닙니다: {value!r}')
    return result


def validate_days(days) -> int:
    """대여 일수 검증

    Args:
        days: 대여 일수 (양의 정수)

    Returns:
        검증된 일수

    Raises:
        InvalidInputError: 정수가 아니거나 0 이하인 경우
    """
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidInputError(f'대여 일수는 정수여야 합니다: {days!r}')
    if days <= 0:
        raise InvalidInputError(f'대여 일수는 1일 이상이어야 합니다: {days}')
    return days


class PricingPolicy:
    """기간별 할인 요금 정책

    구간은 최소 일수 기준(이상)이며 가장 높은 구간부터 검사한다.
    30일 구간을 7일 구간보다 먼저 확인해야 30일 이상 대여에 20%가 적용된다.
    """

    def __init__(self, tiers: Iterable[Tuple[int, Number]] = DEFAULT_DISCOUNT_TIERS):
        normalized = []
        for min_days, factor in tiers:
            factor = to_decimal(factor)
            if min_days <= 0 or factor <= 0 or factor > NO_DISCOUNT:
                raise InvalidInputError(f'잘못된 할인 구간입니다: ({min_days}, {factor})')
            normalized.append((int(min_days), factor))

        self._tiers = tuple(sorted(normalized, key=lambda tier: tier[0], reverse=True))

    @property
    def tiers(self) -> Tuple[Tuple[int, Decimal], ...]:
        return self._tiers

    def discount_factor(self, days: int) -> Decimal:
        """대여 일수에 해당하는 요금 배율"""
        days = validate_days(days)
        for min_days, factor in self._tiers:
            if days >= min_days:
                return factor
        return NO_DISCOUNT

    def discount_percent(self, days: int) -> int:
        """할인율 (%)"""
        return int((NO_DISCOUNT - self.discount_factor(days)) * 100)

    def price(self, base_price_per_day: Number, days: int) -> Decimal:
        """총 대여 요금 = 일일 요금 x 일수 x 할인 배율

        반올림은 하지 않는다 (표시 단계에서 소수 둘째 자리로 포맷).
        """
        days = validate_days(days)
        base = to_decimal(base_price_per_day)
        if base <= 0:
            raise InvalidInputError(f'일일 요금은 0보다 커야 합니다: {base}')
        return base * days * self.discount_factor(days)

    def quote(self, base_price_per_day: Number, days: int) -> Dict:
        """대여 확정 전 요금 미리보기

        Returns:
            일일 요금, 일수, 할인 전 금액, 할인율, 총액 딕셔너리
        """
        base = to_decimal(base_price_per_day)
        total = self.price(base, days)
        return {
            'base_price_per_day': base,
            'days': days,
            'subtotal': base * days,
            'discount_percent': self.discount_percent(days),
            'total_price': total,
        }

    def __repr__(self):
        tiers = ', '.join(f'{min_days}+:{factor}' for min_days, factor in self._tiers)
        return f"<PricingPolicy [{tiers}]>"


DEFAULT_PRICING = PricingPolicy()


def calculate_price(base_price_per_day: Number, days: int) -> Decimal:
    """기본 할인 정책으로 요금 계산"""
    return DEFAULT_PRICING.price(base_price_per_day, days)
