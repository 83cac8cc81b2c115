import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_erp_gateway
from app.erp.gateway import ErpGateway
from app.schemas.erp import ErpStatusResponse


router = APIRouter(prefix="/erp", tags=["ERP"])
logger = logging.getLogger(__name__)


@router.get("/status", response_model=ErpStatusResponse)
def erp_status(gateway: ErpGateway = Depends(get_erp_gateway)):
    reachable = gateway.ping()
    logger.info("erp_status reachable=%s", reachable)
    return ErpStatusResponse(reachable=reachable)
