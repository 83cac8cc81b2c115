from pydantic import BaseModel


class ErpStatusResponse(BaseModel):
    reachable: bool
