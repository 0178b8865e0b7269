"""toggle テスト共通ヘルパー"""

import base64

import pytest

from hyphen_toggle import ToggleContext, ToggleUser

HORIZON_URL = "https://horizon.example"


def make_public_key(org_id: str, secret: str = "secret") -> str:
    return "public_" + base64.b64encode(f"{org_id}:{secret}".encode()).decode()


@pytest.fixture
def context() -> ToggleContext:
    return ToggleContext(
        targeting_key="user-123",
        ip_address="203.0.113.42",
        custom_attributes={"subscriptionLevel": "premium", "region": "us-east"},
        user=ToggleUser(
            id="user-123",
            email="john.doe@example.com",
            name="John Doe",
            custom_attributes={"role": "admin"},
        ),
    )
