"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- auth: 회원가입/로그인
- orders: 주문 등록/조회
- balance: 잔고, 출금, 출금 내역
"""
