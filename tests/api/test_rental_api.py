#!/usr/bin/env python3
"""
REST API 엔드포인트 테스트
"""

import logging
import tempfile
import unittest
import os
import sys

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from car_rental import LOG_FILE_NAME, create_app


class TestRentalApi(unittest.TestCase):
    """렌터카 API 테스트"""

    def setUp(self):
        """테스트 전 설정"""
        self.app = create_app('testing')
        self.client = self.app.test_client()

    def _rent(self, vehicle_id='C001', **payload):
        payload.setdefault('days', 10)
        if 'customer_id' not in payload:
            payload.setdefault('name', '홍길동')
            payload.setdefault('phone', '010-1234-5678')
        return self.client.post(f'/api/vehicles/{vehicle_id}/rent', json=payload)

    def test_health_check(self):
        """헬스 체크"""
        response = self.client.get('/api/health')
        data = response.get_json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data['status'], 'healthy')
        self.assertTrue(data['consistent'])
        self.assertEqual(data['stats']['vehicles'], 5)

    def test_list_vehicles(self):
        """차량 목록 조회"""
        response = self.client.get('/api/vehicles')
        data = response.get_json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(data['count'], 5)
        self.assertEqual(data['vehicles'][0]['id'], 'C001')

        self._rent('C002')
        available = self.client.get('/api/vehicles?status=available').get_json()
        self.assertEqual(available['count'], 4)
        self.assertNotIn('C002', [v['id'] for v in available['vehicles']])

        bad = self.client.get('/api/vehicles?status=broken')
        self.assertEqual(bad.status_code, 400)

    def test_get_vehicle(self):
        """차량 단건 조회 (대소문자 무시)"""
        response = self.client.get('/api/vehicles/c003')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['vehicle']['category'], 'SUV')

        missing = self.client.get('/api/vehicles/X999')
        self.assertEqual(missing.status_code, 404)
        self.assertFalse(missing.get_json()['success'])

    def test_quote(self):
        """요금 미리보기"""
        response = self.client.get('/api/vehicles/C001/quote?days=7')
        quote = response.get_json()['quote']

        self.assertEqual(response.status_code, 200)
        self.assertEqual(quote['subtotal'], 420.0)
        self.assertEqual(quote['discount_percent'], 10)
        self.assertEqual(quote['total_price'], 378.0)

        for days in ('0', 'abc', '', '1000'):
            bad = self.client.get(f'/api/vehicles/C001/quote?days={days}')
            self.assertEqual(bad.status_code, 400, days)

        self.assertEqual(self.client.get('/api/vehicles/X9/quote?days=3').status_code, 404)

    def test_register_customer(self):
        """고객 등록"""
        first = self.client.post('/api/customers', json={'name': '홍길동', 'phone': '010'})
        second = self.client.post('/api/customers', json={'name': '김철수'})

        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.get_json()['customer']['id'], 'CUS001')
        self.assertEqual(second.get_json()['customer']['id'], 'CUS002')

        blank = self.client.post('/api/customers', json={'name': '  '})
        self.assertEqual(blank.status_code, 400)

        listing = self.client.get('/api/customers').get_json()
        self.assertEqual(listing['count'], 2)

    def test_get_customer_with_history(self):
        """고객 조회 (대여 이력 포함)"""
        self._rent('C001', days=3)

        response = self.client.get('/api/customers/CUS001')
        customer = response.get_json()['customer']

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(customer['history']), 1)
        self.assertIn('Toyota Camry', customer['history'][0])

        self.assertEqual(self.client.get('/api/customers/CUS404').status_code, 404)

    def test_rent_and_return_cycle(self):
        """대여 -> 재대여 실패 -> 반납 -> 재반납"""
        response = self._rent('C001', days=10)
        data = response.get_json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(data['rental']['total_price'], 540.0)
        self.assertEqual(data['rental']['status'], 'ACTIVE')
        self.assertEqual(data['receipt']['total_price'], '540.00')
        self.assertEqual(data['discount_percent'], 10)

        conflict = self._rent('C001', name='김철수')
        self.assertEqual(conflict.status_code, 409)
        # 대여 불가 시 신규 고객이 등록되지 않음
        self.assertEqual(self.client.get('/api/customers').get_json()['count'], 1)

        active = self.client.get('/api/rentals').get_json()
        self.assertEqual(active['count'], 1)

        returned = self.client.post('/api/vehicles/c001/return')
        returned_data = returned.get_json()
        self.assertEqual(returned.status_code, 200)
        self.assertTrue(returned_data['returned'])
        self.assertEqual(returned_data['rental']['status'], 'COMPLETED')
        self.assertEqual(returned_data['rental']['total_price'], 540.0)

        again = self.client.post('/api/vehicles/C001/return')
        self.assertEqual(again.status_code, 200)
        self.assertFalse(again.get_json()['returned'])

        completed = self.client.get('/api/rentals?status=completed').get_json()
        self.assertEqual(completed['count'], 1)
        self.assertEqual(self.client.get('/api/rentals').get_json()['count'], 0)

    def test_rent_existing_customer(self):
        """기존 고객 ID로 대여"""
        self.client.post('/api/customers', json={'name': '홍길동'})

        response = self._rent('C004', customer_id='CUS001', days=2)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()['rental']['customer_id'], 'CUS001')

        missing = self._rent('C005', customer_id='CUS777', days=2)
        self.assertEqual(missing.status_code, 404)

    def test_rent_validation_errors(self):
        """대여 요청 검증"""
        self.assertEqual(self._rent('C001', days=0).status_code, 400)
        self.assertEqual(self._rent('C001', days='many').status_code, 400)
        self.assertEqual(self._rent('C001', name='').status_code, 400)
        self.assertEqual(self._rent('NOPE').status_code, 404)

        # 검증 실패 후에도 차량은 대여 가능
        vehicle = self.client.get('/api/vehicles/C001').get_json()['vehicle']
        self.assertTrue(vehicle['is_available'])

    def test_non_object_json_body(self):
        """JSON 객체가 아닌 본문은 400"""
        response = self.client.post('/api/customers', json=['x'])
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.get_json()['success'])

        self.assertEqual(self.client.post('/api/vehicles/C001/rent', json=['x']).status_code, 400)
        self.assertEqual(self.client.post('/api/vehicles/C001/rent', json='3').status_code, 400)
        self.assertEqual(self.app.ledger.stats()['customers'], 0)

    def test_non_string_fields(self):
        """문자열이 아닌 name / phone / customer_id 는 400"""
        self.assertEqual(self.client.post('/api/customers', json={'name': 123}).status_code, 400)
        self.assertEqual(
            self.client.post('/api/customers', json={'name': '홍길동', 'phone': 1012345678}).status_code,
            400
        )
        self.assertEqual(self._rent('C001', customer_id=5, days=3).status_code, 400)
        self.assertEqual(self._rent('C001', name=['홍길동'], days=3).status_code, 400)

        self.assertEqual(self.app.ledger.stats()['customers'], 0)
        self.assertTrue(self.app.ledger.find_vehicle('C001').available)

    def test_failed_rent_does_not_register_customer(self):
        """대여가 성립하지 않으면 신규 고객도 등록되지 않음"""
        self.assertEqual(self._rent('C001', name='홍길동').status_code, 201)

        taken = self._rent('C001', name='김철수')
        self.assertEqual(taken.status_code, 409)
        self.assertEqual(self._rent('C002', name='김철수', days=0).status_code, 400)
        self.assertEqual(self._rent('NOPE', name='김철수').status_code, 404)

        customers = self.client.get('/api/customers').get_json()
        self.assertEqual(customers['count'], 1)
        self.assertEqual(customers['customers'][0]['name'], '홍길동')

    def test_return_unknown_vehicle(self):
        """존재하지 않는 차량 반납"""
        response = self.client.post('/api/vehicles/NOPE/return')
        self.assertEqual(response.status_code, 404)

    def test_return_inconsistent_vehicle(self):
        """활성 기록 없는 대여중 차량 반납은 500"""
        self.app.ledger.find_vehicle('C003').rent()

        response = self.client.post('/api/vehicles/C003/return')
        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.get_json()['success'])

        health = self.client.get('/api/health').get_json()
        self.assertFalse(health['consistent'])
        self.assertEqual(health['status'], 'degraded')

    def test_unknown_route_returns_json(self):
        """없는 경로는 JSON 404"""
        response = self.client.get('/api/unknown')
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.get_json()['success'])

    def test_apps_do_not_share_ledger(self):
        """앱마다 독립된 원장"""
        self._rent('C001')
        other = create_app('testing')
        self.assertIsNot(other.ledger, self.app.ledger)
        self.assertTrue(other.ledger.find_vehicle('C001').available)


class TestUnseededApp(unittest.TestCase):
    """기본 차량 미등록 설정 테스트"""

    def setUp(self):
        """테스트 전 설정"""
        os.environ['RENTAL_SEED_FLEET'] = 'False'
        self.addCleanup(os.environ.pop, 'RENTAL_SEED_FLEET', None)
        self.app = create_app('testing')

    def test_empty_catalog(self):
        """빈 카탈로그"""
        response = self.app.test_client().get('/api/vehicles')
        self.assertEqual(response.get_json()['count'], 0)


class TestProductionLogging(unittest.TestCase):
    """프로덕션 파일 로깅 설정 테스트"""

    def setUp(self):
        """테스트 전 설정"""
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.log_dir = tmp.name

        os.environ['RENTAL_LOG_DIR'] = self.log_dir
        self.addCleanup(os.environ.pop, 'RENTAL_LOG_DIR', None)
        self.addCleanup(self._detach_handlers)

    def _log_path(self):
        return os.path.abspath(os.path.join(self.log_dir, LOG_FILE_NAME))

    def _file_handlers(self):
        return [
            h for h in logging.getLogger('car_rental').handlers
            if isinstance(h, logging.FileHandler) and h.baseFilename == self._log_path()
        ]

    def _detach_handlers(self):
        package_logger = logging.getLogger('car_rental')
        for handler in self._file_handlers():
            package_logger.removeHandler(handler)
            handler.close()

    def test_file_handler_attached_once(self):
        """앱을 여러 번 생성해도 파일 핸들러는 하나"""
        create_app('production')
        create_app('production')

        self.assertEqual(len(self._file_handlers()), 1)
        self.assertTrue(os.path.exists(self._log_path()))

    def test_testing_preset_skips_file_logging(self):
        """testing 설정은 파일 로깅을 하지 않음"""
        create_app('testing')

        self.assertEqual(self._file_handlers(), [])


if __name__ == '__main__':
    unittest.main()
