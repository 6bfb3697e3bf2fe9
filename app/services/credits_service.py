"""Supabase 크레딧 차감

profiles 테이블의 credits 컬럼을 사용자 id 로 조회/갱신한다.
supabase 클라이언트는 동기 → asyncio.to_thread 로 호출
"""
import asyncio
from typing import Any, Optional

from supabase import create_client

from ..utils.errors import CreditsUnavailable, InsufficientCredits, MalformedRequest
from ..utils.logger import logger


class SupabaseCreditsLedger:
    """사용자 크레딧 잔액 조회 및 차감"""

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "profiles",
        client: Optional[Any] = None,
    ):
        if client is None:
            if not url or not key:
                raise ValueError("SUPABASE_URL / SUPABASE_KEY가 설정되지 않았습니다.")
            client = create_client(url, key)

        self.client = client
        self.table = table

        logger.info(f"SupabaseCreditsLedger initialized (table={table})")

    def _fetch_balance(self, user_id: str) -> int:
        response = (
            self.client.table(self.table)
            .select("credits")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            raise MalformedRequest(f"No credits profile found for user '{user_id}'.")
        return int(rows[0].get("credits") or 0)

    def _write_balance(self, user_id: str, expected: int, new_balance: int) -> bool:
        # 읽은 잔액이 그대로일 때만 갱신 (동시 차감 방지)
        response = (
            self.client.table(self.table)
            .update({"credits": new_balance})
            .eq("id", user_id)
            .eq("credits", expected)
            .execute()
        )
        return bool(response.data)

    async def get_balance(self, user_id: str) -> int:
        try:
            return await asyncio.to_thread(self._fetch_balance, user_id)
        except MalformedRequest:
            raise
        except Exception as e:
            logger.error(f"Credits lookup failed for {user_id}: {type(e).__name__}: {str(e)}", exc_info=True)
            raise CreditsUnavailable("Could not check the credits balance.") from e

    async def debit(self, user_id: str, amount: int) -> int:
        """잔액 확인 후 amount 만큼 차감, 차감 후 잔액 반환"""
        balance = await self.get_balance(user_id)
        if balance < amount:
            logger.warning(f"User {user_id} has insufficient credits ({balance}) for cost {amount}")
            raise InsufficientCredits("Insufficient credits.", details={"balance": balance, "cost": amount})

        new_balance = balance - amount
        try:
            updated = await asyncio.to_thread(self._write_balance, user_id, balance, new_balance)
        except Exception as e:
            logger.error(f"Credits debit failed for {user_id}: {type(e).__name__}: {str(e)}", exc_info=True)
            raise CreditsUnavailable("Credit deduction failed.") from e

        if not updated:
            logger.warning(f"Credits for {user_id} changed during debit, aborting")
            raise CreditsUnavailable("Credit balance changed during deduction. Please try again.")

        logger.info(f"Credits deducted for user {user_id}: {balance} -> {new_balance} (cost {amount})")
        return new_balance
