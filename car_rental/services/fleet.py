"""
기본 차량 구성 (초기 카탈로그)
"""

import logging
from typing import Iterable, Tuple

from car_rental.models.vehicle import Vehicle, VehicleCategory

logger = logging.getLogger(__name__)

# (차량 ID, 제조사, 모델, 일일 요금, 분류)
DEFAULT_FLEET: Tuple[Tuple[str, str, str, str, VehicleCategory], ...] = (
    ('C001', 'Toyota', 'Camry', '60.0', VehicleCategory.SEDAN),
    ('C002', 'Honda', 'Accord', '70.0', VehicleCategory.SEDAN),
    ('C003', 'Mahindra', 'Thar', '150.0', VehicleCategory.SUV),
    ('C004', 'Maruti', 'Swift', '40.0', VehicleCategory.ECONOMY),
    ('C005', 'BMW', '5 Series', '200.0', VehicleCategory.LUXURY),
)


def seed_default_fleet(ledger, fleet: Iterable[Tuple] = DEFAULT_FLEET) -> int:
    """원장에 기본 차량 등록

    Args:
        ledger: RentalLedger 인스턴스
        fleet: (ID, 제조사, 모델, 일일 요금, 분류) 목록

    Returns:
        실제로 추가된 차량 수 (중복 ID 제외)
    """
    added = 0
    for vehicle_id, brand, model, price, category in fleet:
        if ledger.add_vehicle(Vehicle(vehicle_id, brand, model, price, category)):
            added += 1

    logger.info(f"🚗 기본 차량 등록 완료: {added}대")
    return added
