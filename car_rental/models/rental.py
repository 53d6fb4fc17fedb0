"""
대여 기록 모델
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from car_rental.exceptions import LedgerInconsistencyError
from car_rental.models.customer import Customer
from car_rental.models.vehicle import Vehicle

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M'


class RentalStatus(Enum):
    """대여 상태"""
    ACTIVE = "ACTIVE"           # 대여중
    COMPLETED = "COMPLETED"     # 반납 완료


class RentalRecord:
    """대여 기록 (상태 전이 외에는 변경 불가)"""

    def __init__(self, rental_id: str, vehicle: Vehicle, customer: Customer,
                 days: int, total_price: Decimal,
                 rented_at: Optional[datetime] = None):
        self._id = rental_id
        self._vehicle = vehicle
        self._customer = customer
        self._days = days
        self._total_price = total_price
        self._rented_at = rented_at or datetime.now()
        self._returned_at: Optional[datetime] = None
        self._status = RentalStatus.ACTIVE

    @property
    def id(self) -> str:
        return self._id

    @property
    def vehicle(self) -> Vehicle:
        return self._vehicle

    @property
    def customer(self) -> Customer:
        return self._customer

    @property
    def days(self) -> int:
        return self._days

    @property
    def total_price(self) -> Decimal:
        return self._total_price

    @property
    def rented_at(self) -> datetime:
        return self._rented_at

    @property
    def returned_at(self) -> Optional[datetime]:
        return self._returned_at

    @property
    def status(self) -> RentalStatus:
        return self._status

    @property
    def timestamp(self) -> str:
        """대여 일시 (YYYY-MM-DD HH:MM)"""
        return self._rented_at.strftime(TIMESTAMP_FORMAT)

    @property
    def is_active(self) -> bool:
        """활성 대여 여부"""
        return self._status == RentalStatus.ACTIVE

    def mark_completed(self, returned_at: Optional[datetime] = None):
        """반납 완료 처리 (ACTIVE -> COMPLETED, 되돌릴 수 없음)

        원장(RentalLedger)에서만 호출한다.
        """
        if self._status != RentalStatus.ACTIVE:
            raise LedgerInconsistencyError(f'이미 반납 완료된 대여 기록입니다: {self._id}')
        self._status = RentalStatus.COMPLETED
        self._returned_at = returned_at or datetime.now()

    def summary(self) -> str:
        """활성 대여 목록 한 줄 요약"""
        car = f'{self._vehicle.id} {self._vehicle.model}'
        return (f'차량: {car:<15} | 고객: {self._customer.name:<20} | '
                f'일수: {self._days} | 총액: ${self._total_price:.2f}')

    def to_receipt(self) -> Dict:
        """영수증 항목 (출력 형식은 호출 측에서 결정)"""
        return {
            'rental_id': self._id,
            'customer_id': self._customer.id,
            'customer_name': self._customer.name,
            'phone': self._customer.phone,
            'car': self._vehicle.display_name,
            'car_id': self._vehicle.id,
            'category': self._vehicle.category.value,
            'days': self._days,
            'price_per_day': f'{self._vehicle.base_price_per_day:.2f}',
            'rental_date': self.timestamp,
            'total_price': f'{self._total_price:.2f}',
        }

    def to_dict(self) -> Dict:
        """딕셔너리로 변환"""
        return {
            'id': self._id,
            'vehicle_id': self._vehicle.id,
            'vehicle': self._vehicle.display_name,
            'customer_id': self._customer.id,
            'customer_name': self._customer.name,
            'days': self._days,
            'total_price': float(self._total_price),
            'rented_at': self._rented_at.isoformat(),
            'returned_at': self._returned_at.isoformat() if self._returned_at else None,
            'timestamp': self.timestamp,
            'status': self._status.value,
            'is_active': self.is_active,
        }

    def __repr__(self):
        return f"<RentalRecord {self._id} ({self._vehicle.id} -> {self._customer.id}, {self._status.value})>"
