"""
차량 모델
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from car_rental.exceptions import InvalidInputError, VehicleNotAvailableError
from car_rental.services.pricing import DEFAULT_PRICING, Number, PricingPolicy, to_decimal


class VehicleCategory(Enum):
    """차량 분류"""
    ECONOMY = "ECONOMY"
    SEDAN = "SEDAN"
    SUV = "SUV"
    LUXURY = "LUXURY"

    @classmethod
    def parse(cls, value) -> 'VehicleCategory':
        """문자열 또는 enum 값을 VehicleCategory로 변환"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise InvalidInputError(f'알 수 없는 차량 분류입니다: {value!r}')


def normalize_vehicle_id(vehicle_id: str) -> str:
    """차량 ID 정규화 (대소문자 구분 없이 비교하기 위함)"""
    return (vehicle_id or '').strip().upper()


class Vehicle:
    """대여 차량"""

    def __init__(self, vehicle_id: str, brand: str, model: str,
                 base_price_per_day: Number,
                 category: VehicleCategory = VehicleCategory.ECONOMY,
                 pricing: Optional[PricingPolicy] = None):
        if not vehicle_id or not str(vehicle_id).strip():
            raise InvalidInputError('차량 ID는 비어있을 수 없습니다.')

        price = to_decimal(base_price_per_day)
        if price <= 0:
            raise InvalidInputError(f'일일 요금은 0보다 커야 합니다: {base_price_per_day}')

        self._id = str(vehicle_id).strip()  # C001 등
        self._brand = brand
        self._model = model
        self._base_price_per_day = price
        self._category = VehicleCategory.parse(category)
        self._pricing = pricing or DEFAULT_PRICING
        self._available = True

    @property
    def id(self) -> str:
        return self._id

    @property
    def key(self) -> str:
        """카탈로그 조회용 정규화 ID"""
        return normalize_vehicle_id(self._id)

    @property
    def brand(self) -> str:
        return self._brand

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_price_per_day(self) -> Decimal:
        return self._base_price_per_day

    @property
    def category(self) -> VehicleCategory:
        return self._category

    @property
    def available(self) -> bool:
        return self._available

    @property
    def display_name(self) -> str:
        """화면 표시용 이름"""
        return f'{self._brand} {self._model}'

    def rent(self):
        """대여 처리 (사용 가능 -> 대여중)

        Raises:
            VehicleNotAvailableError: 이미 대여중인 경우
        """
        if not self._available:
            raise VehicleNotAvailableError(self._id)
        self._available = False

    def return_vehicle(self):
        """반납 처리 (항상 사용 가능 상태로)"""
        self._available = True

    def calculate_price(self, days: int) -> Decimal:
        """대여 일수에 대한 총 요금"""
        return self._pricing.price(self._base_price_per_day, days)

    def quote(self, days: int) -> Dict:
        """요금 미리보기 (차량 정보 포함)"""
        quote = self._pricing.quote(self._base_price_per_day, days)
        quote.update({
            'vehicle_id': self._id,
            'display_name': self.display_name,
        })
        return quote

    def to_dict(self) -> Dict:
        """딕셔너리로 변환"""
        return {
            'id': self._id,
            'brand': self._brand,
            'model': self._model,
            'display_name': self.display_name,
            'category': self._category.value,
            'base_price_per_day': float(self._base_price_per_day),
            'is_available': self._available,
        }

    def summary(self) -> str:
        """차량 목록 한 줄 요약"""
        status = '대여가능' if self._available else '대여중'
        return (f'{self._id:<6} | {self._brand:<10} {self._model:<12} | '
                f'{self._category.value:<8} | ${self._base_price_per_day:.2f}/일 | {status}')

    def __repr__(self):
        return f"<Vehicle {self._id} ({'available' if self._available else 'rented'})>"
