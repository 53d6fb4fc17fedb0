"""
렌터카 도메인 모델

차량, 고객, 대여 기록
"""

from .vehicle import Vehicle, VehicleCategory, normalize_vehicle_id
from .customer import Customer, HistoryView
from .rental import RentalRecord, RentalStatus

__all__ = [
    'Vehicle', 'VehicleCategory', 'normalize_vehicle_id',
    'Customer', 'HistoryView',
    'RentalRecord', 'RentalStatus',
]
