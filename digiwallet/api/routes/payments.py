from aiohttp import web
from ..keys import CONTAINER
from ..middlewares import json_result, login_required, read_body, service_response
from ..schemas import PaymentRequest, QRPaymentRequest, TopUpRequest, TransferRequest

routes = web.RouteTableDef()

def _int_param(request: web.Request, name: str, default: int) -> int:
    try:
        return int(request.query.get(name, default)) or default
    except ValueError:
        return default

@routes.get("/payments/qr-info")
async def qr_info(request: web.Request) -> web.Response:
    qr_id = request.query.get("qrId")
    if not qr_id:
        return json_result({"success": False, "message": "QR id is required"}, status=400)

    info = request.app[CONTAINER].payment_service.get_qr_info(qr_id)
    if not info:
        return json_result({"success": False, "message": "QR code not found"}, status=404)
    return json_result({"success": True, "data": info})

@routes.post("/payments/transfer")
@login_required
async def transfer(request: web.Request) -> web.Response:
    body = await read_body(request, TransferRequest)
    result = await request.app[CONTAINER].payment_service.transfer_money(
        request["user_id"], body.to_user_id, body.amount
    )
    return service_response(result)

@routes.post("/payments/payment")
@login_required
async def payment(request: web.Request) -> web.Response:
    """Merchant payment followed by cashback on the committed payment"""
    body = await read_body(request, PaymentRequest)
    container = request.app[CONTAINER]
    result = await container.payment_service.process_payment(
        request["user_id"], body.merchant_id, body.amount
    )
    if result["success"]:
        data = result["data"]
        data["cashback"] = await container.cashback_service.reward_payment(
            request["user_id"], body.merchant_id, data["amount"], data["transaction_id"]
        )
    return service_response(result)

@routes.post("/payments/topup")
@login_required
async def top_up(request: web.Request) -> web.Response:
    body = await read_body(request, TopUpRequest)
    result = await request.app[CONTAINER].payment_service.top_up_wallet(
        request["user_id"], body.amount, body.method
    )
    return service_response(result)

@routes.post("/payments/qr-payment")
@login_required
async def qr_payment(request: web.Request) -> web.Response:
    body = await read_body(request, QRPaymentRequest)
    result = await request.app[CONTAINER].payment_service.process_qr_payment(
        request["user_id"], body.qr_data
    )
    return service_response(result)

@routes.get("/payments/balance")
@login_required
async def balance(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].payment_service.get_wallet_balance(request["user_id"])
    return service_response(result, fail_status=404)

@routes.get("/payments/history")
@login_required
async def history(request: web.Request) -> web.Response:
    result = await request.app[CONTAINER].payment_service.get_transaction_history(
        request["user_id"],
        page=_int_param(request, "page", 1),
        page_size=_int_param(request, "pageSize", 20)
    )
    return service_response(result)
