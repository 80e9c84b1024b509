"""Request bodies of the HTTP API; fields arrive in camelCase"""
from typing import Any, ClassVar, Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field

class RequestBody(BaseModel):
    error_message: ClassVar[str] = "Invalid request body"

    model_config = ConfigDict(populate_by_name=True)

class LoginRequest(RequestBody):
    error_message: ClassVar[str] = "User id is required"
    user_id: str = Field(alias="userId", min_length=1)

class TransferRequest(RequestBody):
    error_message: ClassVar[str] = "Receiver user id and amount are required"
    to_user_id: str = Field(alias="toUserId", min_length=1)
    amount: Any = None

class PaymentRequest(RequestBody):
    error_message: ClassVar[str] = "Merchant id and amount are required"
    merchant_id: str = Field(alias="merchantId", min_length=1)
    amount: Any = None

class TopUpRequest(RequestBody):
    amount: Any = None
    method: str = "bank_transfer"

class QRPaymentRequest(RequestBody):
    error_message: ClassVar[str] = "QR code data is required"
    qr_data: Union[str, Dict[str, Any]] = Field(alias="qrData")

class EqualSplitRequest(RequestBody):
    error_message: ClassVar[str] = "Original transaction id and debtor list are required"
    original_tx_id: str = Field(alias="originalTxId", min_length=1)
    debtor_user_ids: List[str] = Field(alias="debtorUserIds")

class DebtorWeight(RequestBody):
    user_id: str = Field(alias="userId", min_length=1)
    weight: Any = None

class WeightedSplitRequest(RequestBody):
    error_message: ClassVar[str] = "Original transaction id and debtor weights are required"
    original_tx_id: str = Field(alias="originalTxId", min_length=1)
    debtor_weights: List[DebtorWeight] = Field(alias="debtorWeights")

class BudgetRequest(RequestBody):
    error_message: ClassVar[str] = "Month, category and limit are required"
    month: str
    category: str
    limit_amount: Any = Field(default=None, alias="limitAmount")
