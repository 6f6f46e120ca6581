from fastapi import APIRouter, Depends
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.modules.account.schemas import AccountDeletionResponse
from vault.modules.account.service import AccountService

router = APIRouter(prefix="/account", tags=["account"])


def get_account_service(ctx: RequestContext = Depends(get_request_context)) -> AccountService:
    return AccountService(ctx)


@router.delete("", response_model=AccountDeletionResponse)
async def delete_account_data(service: AccountService = Depends(get_account_service)):
    """Erase everything the caller owns, including the teams they created"""
    return service.delete_account_data()
