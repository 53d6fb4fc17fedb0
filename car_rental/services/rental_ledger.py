"""
렌터카 원장 (차량 카탈로그 + 고객 + 대여 기록)

차량 가용 상태와 활성 대여 기록의 일관성은 이 클래스의
rent_vehicle / return_vehicle 에서만 변경된다.
"""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from car_rental.exceptions import (
    CustomerNotFoundError, InvalidInputError, LedgerInconsistencyError,
    VehicleNotAvailableError, VehicleNotFoundError
)
from car_rental.models.customer import Customer
from car_rental.models.rental import RentalRecord
from car_rental.models.vehicle import Vehicle, normalize_vehicle_id
from car_rental.services.pricing import validate_days

logger = logging.getLogger(__name__)


class RentalLedger:
    """차량 대여/반납 비즈니스 로직 (메모리 기반)"""

    CUSTOMER_ID_PREFIX = 'CUS'
    RENTAL_ID_PREFIX = 'RNT'

    def __init__(self):
        self._vehicles: Dict[str, Vehicle] = {}    # 정규화 ID -> Vehicle
        self._customers: Dict[str, Customer] = {}  # 고객 ID -> Customer
        self._active: List[RentalRecord] = []
        self._completed: List[RentalRecord] = []

        # 원장 인스턴스별 일련번호 (재사용하지 않음)
        self._next_customer_seq = 1
        self._next_rental_seq = 1

        self._lock = threading.RLock()

        logger.info("RentalLedger 초기화 완료")

    # ---- 차량 관리 ----

    def add_vehicle(self, vehicle: Vehicle) -> bool:
        """카탈로그에 차량 추가

        Args:
            vehicle: 추가할 차량

        Returns:
            추가 여부 (중복 ID면 False, 예외 없음)
        """
        with self._lock:
            if vehicle.key in self._vehicles:
                logger.warning(f"⚠️ 이미 등록된 차량 ID: {vehicle.id}")
                return False

            self._vehicles[vehicle.key] = vehicle
            logger.info(f"차량 등록: {vehicle.id} ({vehicle.display_name})")
            return True

    def find_vehicle(self, vehicle_id: str) -> Vehicle:
        """차량 ID로 차량 조회 (대소문자 무시)

        Raises:
            VehicleNotFoundError: 해당 ID의 차량이 없는 경우
        """
        with self._lock:
            vehicle = self._vehicles.get(normalize_vehicle_id(vehicle_id))
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    # ---- 고객 관리 ----

    def register_customer(self, name: str, phone: str = '') -> Customer:
        """고객 등록 (CUS001, CUS002, ... 순차 발급)

        Raises:
            InvalidInputError: 이름이 비어있거나 문자열이 아닌 경우
        """
        with self._lock:
            # Customer 생성이 실패하면 일련번호는 소모되지 않는다
            customer_id = f'{self.CUSTOMER_ID_PREFIX}{self._next_customer_seq:03d}'
            customer = Customer(customer_id, name, phone)
            self._next_customer_seq += 1
            self._customers[customer_id] = customer

        logger.info(f"고객 등록: {customer_id} ({customer.name})")
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        """고객 ID로 고객 조회

        Raises:
            InvalidInputError: 고객 ID가 문자열이 아닌 경우
            CustomerNotFoundError: 등록되지 않은 고객
        """
        if customer_id is not None and not isinstance(customer_id, str):
            raise InvalidInputError('고객 ID는 문자열이어야 합니다.')

        with self._lock:
            customer = self._customers.get((customer_id or '').strip().upper())
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    # ---- 대여/반납 ----

    def rent_vehicle(self, vehicle: Vehicle, customer: Customer, days: int) -> RentalRecord:
        """차량 대여

        차량을 대여중으로 바꾸는 유일한 경로.

        Args:
            vehicle: 카탈로그에 등록된 차량
            customer: 등록된 고객
            days: 대여 일수 (1 이상)

        Returns:
            생성된 활성 대여 기록

        Raises:
            InvalidInputError: 일수가 잘못된 경우 (차량 상태는 변하지 않음)
            VehicleNotFoundError: 카탈로그에 없는 차량
            CustomerNotFoundError: 등록되지 않은 고객
            VehicleNotAvailableError: 이미 대여중인 차량
        """
        days = validate_days(days)

        with self._lock:
            if self._vehicles.get(vehicle.key) is not vehicle:
                raise VehicleNotFoundError(vehicle.id)
            if self._customers.get(customer.id) is not customer:
                raise CustomerNotFoundError(customer.id)

            # 요금은 상태 변경 전에 계산
            total_price = vehicle.calculate_price(days)

            vehicle.rent()

            rental_id = f'{self.RENTAL_ID_PREFIX}{self._next_rental_seq:04d}'
            self._next_rental_seq += 1
            rental = RentalRecord(rental_id, vehicle, customer, days, total_price,
                                  rented_at=datetime.now())
            self._active.append(rental)

            customer.add_history_record(
                f'{vehicle.display_name} {days}일 대여 ({rental.timestamp})'
            )

        logger.info(f"차량 대여: {vehicle.id} <- {customer.id} | {days}일 | ${total_price:.2f}")
        return rental

    def rent_to_new_customer(self, vehicle: Vehicle, name: str, phone: str,
                             days: int) -> RentalRecord:
        """신규 고객 등록과 차량 대여를 한 번에 처리

        대여할 수 없으면 고객을 등록하지 않는다.

        Raises:
            InvalidInputError: 일수 또는 고객 정보가 잘못된 경우
            VehicleNotFoundError: 카탈로그에 없는 차량
            VehicleNotAvailableError: 이미 대여중인 차량
        """
        days = validate_days(days)

        with self._lock:
            if self._vehicles.get(vehicle.key) is not vehicle:
                raise VehicleNotFoundError(vehicle.id)
            if not vehicle.available:
                raise VehicleNotAvailableError(vehicle.id)

            customer = self.register_customer(name, phone)
            return self.rent_vehicle(vehicle, customer, days)

    def return_vehicle(self, vehicle_id: str) -> Optional[RentalRecord]:
        """차량 반납

        Args:
            vehicle_id: 반납할 차량 ID

        Returns:
            반납 완료된 대여 기록, 대여중이 아닌 차량이면 None

        Raises:
            VehicleNotFoundError: 해당 ID의 차량이 없는 경우
            LedgerInconsistencyError: 대여중 차량에 활성 대여 기록이 없는 경우
        """
        with self._lock:
            vehicle = self.find_vehicle(vehicle_id)

            if vehicle.available:
                logger.warning(f"⚠️ 대여중이 아닌 차량입니다: {vehicle.id}")
                return None

            rental = self._find_active_rental(vehicle)
            if rental is None:
                logger.error(f"❌ 대여 기록 없음 - 원장 불일치: {vehicle.id}")
                raise LedgerInconsistencyError(
                    f'{vehicle.id} 차량이 대여중이지만 활성 대여 기록이 없습니다.'
                )

            self._active.remove(rental)
            rental.mark_completed()
            self._completed.append(rental)
            vehicle.return_vehicle()

        logger.info(f"차량 반납: {vehicle.id} | 고객: {rental.customer.name} | "
                    f"총액: ${rental.total_price:.2f}")
        return rental

    def find_active_rental(self, vehicle_id: str) -> Optional[RentalRecord]:
        """차량의 활성 대여 기록 조회"""
        with self._lock:
            return self._find_active_rental(self.find_vehicle(vehicle_id))

    def _find_active_rental(self, vehicle: Vehicle) -> Optional[RentalRecord]:
        for rental in self._active:
            if rental.vehicle.key == vehicle.key:
                return rental
        return None

    # ---- 조회 ----

    def list_all_vehicles(self) -> List[Vehicle]:
        """전체 차량 목록"""
        with self._lock:
            return list(self._vehicles.values())

    def list_available_vehicles(self) -> List[Vehicle]:
        """대여 가능한 차량 목록"""
        with self._lock:
            return [v for v in self._vehicles.values() if v.available]

    def list_customers(self) -> List[Customer]:
        """등록 고객 목록"""
        with self._lock:
            return list(self._customers.values())

    def list_active_rentals(self) -> List[RentalRecord]:
        """활성 대여 목록"""
        with self._lock:
            return list(self._active)

    def list_completed_rentals(self) -> List[RentalRecord]:
        """반납 완료 대여 목록"""
        with self._lock:
            return list(self._completed)

    def active_rental_summaries(self) -> List[str]:
        """활성 대여 한 줄 요약 목록"""
        return [rental.summary() for rental in self.list_active_rentals()]

    def stats(self) -> Dict[str, int]:
        """원장 현황"""
        with self._lock:
            return {
                'vehicles': len(self._vehicles),
                'available_vehicles': sum(1 for v in self._vehicles.values() if v.available),
                'customers': len(self._customers),
                'active_rentals': len(self._active),
                'completed_rentals': len(self._completed),
            }

    def verify_consistency(self):
        """차량 가용 상태와 활성 대여 기록 일관성 검사

        모든 차량에 대해 (대여중) <=> (활성 대여 기록이 정확히 1건) 이어야 한다.

        Raises:
            LedgerInconsistencyError: 불일치가 있는 경우
        """
        with self._lock:
            counts = {key: 0 for key in self._vehicles}
            for rental in self._active:
                key = rental.vehicle.key
                if key not in counts:
                    raise LedgerInconsistencyError(
                        f'카탈로그에 없는 차량의 활성 대여 기록: {rental.id}'
                    )
                counts[key] += 1

            for key, vehicle in self._vehicles.items():
                expected = 0 if vehicle.available else 1
                if counts[key] != expected:
                    raise LedgerInconsistencyError(
                        f'{vehicle.id} 차량 상태 불일치 '
                        f'(대여가능={vehicle.available}, 활성 기록={counts[key]}건)'
                    )

    def __repr__(self):
        stats = self.stats()
        return (f"<RentalLedger vehicles={stats['vehicles']} "
                f"active={stats['active_rentals']} completed={stats['completed_rentals']}>")
