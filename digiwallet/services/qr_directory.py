from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

# Demo catalogue of printed merchant codes
QR_CODES: Dict[str, Dict[str, Any]] = {
    'QR-M1-001': {'merchant_id': 'M1', 'amount': Decimal('25.50'), 'description': 'Coffee and cake'},
    'QR-M1-002': {'merchant_id': 'M1', 'amount': Decimal('12.75'), 'description': 'Turkish coffee'},
    'QR-M2-001': {'merchant_id': 'M2', 'amount': Decimal('45.00'), 'description': 'Groceries'},
    'QR-M2-002': {'merchant_id': 'M2', 'amount': Decimal('32.50'), 'description': 'Snacks'},
    'QR-12345': {
        'merchant_id': 'M1',
        'amount': Decimal('120.00'),
        'description': 'Special order',
        'ts': '2025-11-10T19:30:00+00:00'
    },
}

class QRCodeDirectory:
    """Resolves a QR id to the payload a merchant terminal would encode"""

    def __init__(self, codes: Optional[Dict[str, Dict[str, Any]]] = None,
                 currency: str = 'TRY',
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.codes = codes if codes is not None else QR_CODES
        self.currency = currency
        self.clock = clock

    def get(self, qr_id: str) -> Optional[Dict[str, Any]]:
        code = self.codes.get(qr_id)
        if code is None:
            return None
        return {
            'qr_id': qr_id,
            'merchant_id': code['merchant_id'],
            'amount': code['amount'],
            'currency': self.currency,
            'description': code.get('description'),
            # live codes are issued at lookup time; fixed ones keep their stamp
            'ts': code.get('ts') or self.clock().isoformat()
        }
