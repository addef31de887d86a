import os
from unittest.mock import Mock

ISOLATED_ENV_KEYS = (
    "EBAY_CLIENT_ID",
    "EBAY_CLIENT_SECRET",
    "EBAY_APP_ID",
    "EBAY_DELETION_VERIFICATION_TOKEN",
    "EBAY_DELETION_ENDPOINT_URL",
)

# Blank the credentials before comicsold.config builds its settings, so neither
# the host environment nor a local .env leaks into the tests (env beats .env).
for _key in ISOLATED_ENV_KEYS:
    os.environ[_key] = ""

import pytest  # noqa: E402
from comicsold.config import Settings  # noqa: E402


@pytest.fixture
def cfg():
    """Fully configured settings that never read .env."""
    return Settings(
        _env_file=None,
        EBAY_CLIENT_ID="client-id",
        EBAY_CLIENT_SECRET="client-secret",  # pragma: allowlist secret
        EBAY_APP_ID="app-id",
        EBAY_DELETION_VERIFICATION_TOKEN="verify-token-0123456789abcdef0123456789",
        EBAY_DELETION_ENDPOINT_URL="https://example.com/account-deletion",
    )


def _make_response(status_code=200, payload=None, text=None):
    resp = Mock()
    resp.status_code = status_code
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    resp.text = text if text is not None else str(payload)
    return resp


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    return _make_response


@pytest.fixture
def browse_payload():
    return {
        "total": 2,
        "itemSummaries": [
            {
                "itemId": "v1|111|0",
                "title": "Amazing Spider-Man #300 CGC 9.8",
                "price": {"value": "1500.00", "currency": "USD"},
                "image": {"imageUrl": "https://i.ebayimg.com/300.jpg"},
                "itemWebUrl": "https://www.ebay.com/itm/111",
                "itemCreationDate": "2024-05-01T10:00:00.000Z",
                "condition": "Used",
            },
            {
                "itemId": "v1|222|0",
                "title": "Amazing Spider-Man #300 raw",
                "price": {"value": "250.00", "currency": "USD"},
                "itemWebUrl": "https://www.ebay.com/itm/222",
            },
        ],
    }


@pytest.fixture
def finding_payload():
    return {
        "findCompletedItemsResponse": [
            {
                "ack": ["Success"],
                "version": ["1.13.0"],
                "searchResult": [
                    {
                        "@count": "2",
                        "item": [
                            {
                                "itemId": ["333"],
                                "title": ["Batman #423 McFarlane cover"],
                                "galleryURL": ["https://thumbs.ebaystatic.com/423.jpg"],
                                "viewItemURL": ["https://www.ebay.com/itm/333"],
                                "sellingStatus": [
                                    {
                                        "currentPrice": [
                                            {"@currencyId": "USD", "__value__": "89.99"}
                                        ],
                                        "sellingState": ["EndedWithSales"],
                                    }
                                ],
                                "listingInfo": [
                                    {"endTime": ["2024-04-20T18:30:00.000Z"]}
                                ],
                                "condition": [
                                    {"conditionDisplayName": ["Used"]}
                                ],
                            },
                            {
                                "itemId": ["444"],
                                "title": ["Batman #423 newsstand"],
                                "viewItemURL": ["https://www.ebay.com/itm/444"],
                            },
                        ],
                    }
                ],
            }
        ]
    }


@pytest.fixture
def finding_error_payload():
    def _build(error_id="10001", message="Service call has exceeded the number of times"):
        return {
            "findCompletedItemsResponse": [
                {
                    "ack": ["Failure"],
                    "errorMessage": [
                        {
                            "error": [
                                {
                                    "errorId": [error_id],
                                    "domain": ["Security"],
                                    "message": [message],
                                }
                            ]
                        }
                    ],
                }
            ]
        }

    return _build
