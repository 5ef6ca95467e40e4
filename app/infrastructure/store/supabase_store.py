from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Awaitable, Callable

import httpx

from app.application.exceptions import StoreUpstreamError
from app.application.ports.booking_store import BookingStorePort
from app.core.config import settings
from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.client_profile import ClientProfile, ClientProfileDraft
from app.domain.entities.professional import Professional
from app.domain.entities.service_offering import ServiceOffering


class SupabaseBookingStore(BookingStorePort):
    """
    PostgREST client for the salon tables.

    Tables: professionals, services, profiles (unique user_id), appointments.
    Requests carry the signed-in user's access token when one is available so
    row-level security applies; otherwise the anon key is used.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        access_token: Callable[[], Awaitable[str | None]] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_ANON_KEY
        self._access_token = access_token
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required for the Supabase store")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_professionals(self) -> list[Professional]:
        rows = await self._select(
            "professionals",
            {"select": "*", "active": "eq.true", "order": "name.asc"},
        )
        return [_professional_from_row(row) for row in rows]

    async def list_services(self, professional_id: str) -> list[ServiceOffering]:
        rows = await self._select(
            "services",
            {
                "select": "*",
                "active": "eq.true",
                "professional_id": f"eq.{professional_id}",
                "order": "name.asc",
            },
        )
        return [_service_from_row(row) for row in rows]

    async def get_profile_by_user_id(self, user_id: str) -> ClientProfile | None:
        rows = await self._select("profiles", {"select": "*", "user_id": f"eq.{user_id}", "limit": "1"})
        if not rows:
            return None
        return _profile_from_row(rows[0])

    async def ensure_profile(self, draft: ClientProfileDraft) -> ClientProfile:
        payload = {
            "user_id": draft.user_id,
            "name": draft.name,
            "email": draft.email,
            "phone": draft.phone,
        }
        rows = await self._insert(
            "profiles",
            payload,
            params={"on_conflict": "user_id"},
            prefer="resolution=ignore-duplicates,return=representation",
        )
        if rows:
            self._logger.info("Profile inserted", extra={"reason": "first booking"})
            return _profile_from_row(rows[0])

        # Conflict: another request created it first.
        existing = await self.get_profile_by_user_id(draft.user_id)
        if existing is None:
            raise StoreUpstreamError("Profile upsert returned no row")
        return existing

    async def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        payload = {
            "client_id": draft.client_id,
            "professional_id": draft.professional_id,
            "service_id": draft.service_id,
            "appointment_date": draft.date_iso,
            "appointment_time": draft.time,
            "notes": draft.notes,
        }
        rows = await self._insert("appointments", payload, prefer="return=representation")
        if not rows:
            raise StoreUpstreamError("Appointment insert returned no row")
        appointment = _appointment_from_row(rows[0])
        self._logger.info("Appointment inserted", extra={"appointment_id": appointment.id})
        return appointment

    async def list_appointments(self, client_id: str) -> list[Appointment]:
        rows = await self._select(
            "appointments",
            {
                "select": "*",
                "client_id": f"eq.{client_id}",
                "order": "appointment_date.desc,appointment_time.desc",
            },
        )
        return [_appointment_from_row(row) for row in rows]

    async def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rest/v1/{table}"
        try:
            response = await self._client.get(url, params=params, headers=await self._headers())
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Supabase select failed", extra={"reason": table, "error": str(e)})
            raise StoreUpstreamError(f"Select on {table} failed: {e}") from e
        if not isinstance(data, list):
            raise StoreUpstreamError(f"Unexpected response for {table}")
        return data

    async def _insert(
        self,
        table: str,
        payload: dict[str, Any],
        prefer: str,
        params: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rest/v1/{table}"
        headers = await self._headers()
        headers["Content-Type"] = "application/json"
        headers["Prefer"] = prefer
        try:
            response = await self._client.post(url, params=params, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json() if response.content else []
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Supabase insert failed", extra={"reason": table, "error": str(e)})
            raise StoreUpstreamError(f"Insert into {table} failed: {e}") from e
        if isinstance(data, dict):
            return [data]
        return list(data)

    async def _headers(self) -> dict[str, str]:
        token = await self._access_token() if self._access_token else None
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {token or self._api_key}",
        }


def _professional_from_row(row: dict[str, Any]) -> Professional:
    try:
        return Professional(
            id=str(row["id"]),
            name=str(row["name"]),
            specialty=str(row.get("specialty") or ""),
            avatar_url=row.get("avatar_url"),
            active=bool(row.get("active", True)),
        )
    except KeyError as e:
        raise StoreUpstreamError(f"Malformed professional row: missing {e}") from e


def _service_from_row(row: dict[str, Any]) -> ServiceOffering:
    try:
        return ServiceOffering(
            id=str(row["id"]),
            name=str(row["name"]),
            description=row.get("description"),
            duration_minutes=int(row["duration"]),
            price=Decimal(str(row["price"])),
            professional_id=str(row["professional_id"]),
            active=bool(row.get("active", True)),
        )
    except (KeyError, ArithmeticError, ValueError) as e:
        raise StoreUpstreamError(f"Malformed service row: {e}") from e


def _profile_from_row(row: dict[str, Any]) -> ClientProfile:
    try:
        return ClientProfile(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            name=str(row.get("name") or ""),
            email=str(row.get("email") or ""),
            phone=row.get("phone"),
        )
    except KeyError as e:
        raise StoreUpstreamError(f"Malformed profile row: missing {e}") from e


def _appointment_from_row(row: dict[str, Any]) -> Appointment:
    try:
        created_at = row.get("created_at")
        return Appointment(
            id=str(row["id"]),
            client_id=str(row["client_id"]),
            professional_id=str(row["professional_id"]),
            service_id=str(row["service_id"]),
            date=date.fromisoformat(str(row["appointment_date"])),
            time=str(row["appointment_time"])[:5],
            notes=row.get("notes"),
            created_at=datetime.fromisoformat(created_at.replace("Z", "+00:00")) if created_at else None,
        )
    except (KeyError, ValueError) as e:
        raise StoreUpstreamError(f"Malformed appointment row: {e}") from e
