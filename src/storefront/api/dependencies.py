"""Caller identity, as forwarded by the authentication gateway."""

from fastapi import Header, HTTPException


async def current_customer_id(x_customer_id: str = Header(default="")) -> str:
    if not x_customer_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_customer_id


async def require_admin(x_role: str = Header(default="")) -> None:
    if x_role.lower() != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
