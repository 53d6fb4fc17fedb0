"""
고객 모델
"""

from collections.abc import Sequence
from typing import Dict, List

from car_rental.exceptions import InvalidInputError


class HistoryView(Sequence):
    """대여 이력 읽기 전용 뷰 (복사본이 아닌 원본 리스트를 감싼다)"""

    def __init__(self, records: List[str]):
        self._records = records

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self):
        return len(self._records)

    def __eq__(self, other):
        if isinstance(other, HistoryView):
            return self._records == other._records
        if isinstance(other, (list, tuple)):
            return list(self._records) == list(other)
        return NotImplemented

    def __repr__(self):
        return f"HistoryView({self._records!r})"


class Customer:
    """대여 고객"""

    def __init__(self, customer_id: str, name: str, phone: str = ''):
        if not isinstance(name, str):
            raise InvalidInputError('고객 이름은 문자열이어야 합니다.')
        if not name.strip():
            raise InvalidInputError('고객 이름은 비어있을 수 없습니다.')
        if phone is not None and not isinstance(phone, str):
            raise InvalidInputError('전화번호는 문자열이어야 합니다.')

        self._id = customer_id  # CUS001 등 (원장에서 발급)
        self._name = name.strip()
        self._phone = (phone or '').strip()
        self._history: List[str] = []
        self._history_view = HistoryView(self._history)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def phone(self) -> str:
        return self._phone

    @property
    def history(self) -> HistoryView:
        """대여 이력 (추가 전용, 외부에는 읽기 전용)"""
        return self._history_view

    def add_history_record(self, record: str):
        """대여 이력 한 줄 추가"""
        self._history.append(record)

    def to_dict(self, include_history: bool = False) -> Dict:
        """딕셔너리로 변환"""
        data = {
            'id': self._id,
            'name': self._name,
            'phone': self._phone,
            'rental_count': len(self._history),
        }
        if include_history:
            data['history'] = list(self._history)
        return data

    def __repr__(self):
        return f"<Customer {self._id} ({self._name})>"
