from fastapi import Request

from app.erp.gateway import ErpGateway


def get_erp_gateway(request: Request) -> ErpGateway:
    """The gateway is built once at startup and owned by the application (see ``app.main``)."""
    return request.app.state.erp_gateway
