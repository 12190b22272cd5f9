"""Tests for bid routes."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from findjobs.errors import DuplicateBid
from findjobs.models import BidCreate
from findjobs.routes.bids import create_bid


def place_bid(client, payload) -> str:
    response = client.post("/bid", json=payload)
    assert response.status_code == 200
    return response.json()["insertedId"]


class TestPlaceBid:
    """Bid creation and duplicate prevention."""

    def test_place_bid(self, client, bid_payload):
        response = client.post("/bid", json=bid_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["acknowledged"] is True
        assert ObjectId.is_valid(data["insertedId"])

    def test_new_bid_is_pending(self, client, login, bid_payload):
        place_bid(client, bid_payload())
        login("b@x.com")

        bids = client.get("/my-bids/b@x.com").json()

        assert len(bids) == 1
        assert bids[0]["status"] == "Pending"
        assert bids[0]["price"] == 120

    def test_duplicate_bid_rejected(self, client, login, bid_payload):
        place_bid(client, bid_payload())

        response = client.post("/bid", json=bid_payload(price=90))

        assert response.status_code == 400
        assert response.json() == {"message": "You have already placed a bid on this job"}

        login("b@x.com")
        bids = client.get("/my-bids/b@x.com").json()
        assert len(bids) == 1
        assert bids[0]["price"] == 120

    def test_same_bidder_different_jobs(self, client, login, bid_payload):
        place_bid(client, bid_payload())
        place_bid(client, bid_payload(jobId=str(ObjectId())))
        login("b@x.com")

        assert len(client.get("/my-bids/b@x.com").json()) == 2

    def test_different_bidders_same_job(self, client, bid_payload):
        place_bid(client, bid_payload())
        place_bid(client, bid_payload(email="c@x.com"))

    def test_place_bid_ignores_client_id(self, client, login, bid_payload):
        bid_id = place_bid(client, bid_payload(_id="abc"))
        login("a@x.com")

        assert bid_id != "abc"
        response = client.patch(f"/bid/{bid_id}", json={"status": "Rejected", "_id": "abc"})

        assert response.status_code == 200
        assert response.json()["modifiedCount"] == 1
        assert client.get("/bid-request/a@x.com").json()[0]["_id"] == bid_id

    @pytest.mark.parametrize("missing", ["email", "jobId", "buyer"])
    def test_place_bid_requires_fields(self, client, bid_payload, missing):
        payload = bid_payload()
        del payload[missing]

        response = client.post("/bid", json=payload)

        assert response.status_code == 422

    def test_duplicate_key_from_index_is_duplicate_bid(self):
        """The loser of a concurrent upsert race reports DuplicateBid."""
        collection = MagicMock()
        collection.update_one = AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key"))
        db = {"bids": collection}
        bid = BidCreate(email="b@x.com", jobId="job-1", buyer={"email": "a@x.com"})

        with pytest.raises(DuplicateBid):
            asyncio.run(create_bid(db, bid))


class TestBidListings:
    """Bidder and job-owner views."""

    def test_my_bids_only_returns_own(self, client, login, bid_payload):
        place_bid(client, bid_payload())
        place_bid(client, bid_payload(email="c@x.com"))
        login("b@x.com")

        bids = client.get("/my-bids/b@x.com").json()

        assert [b["email"] for b in bids] == ["b@x.com"]

    def test_bid_requests_for_job_owner(self, client, login, bid_payload):
        place_bid(client, bid_payload())
        place_bid(client, bid_payload(email="c@x.com"))
        place_bid(client, bid_payload(email="d@x.com", buyer={"email": "z@x.com"}))
        login("a@x.com")

        bids = client.get("/bid-request/a@x.com").json()

        assert sorted(b["email"] for b in bids) == ["b@x.com", "c@x.com"]

    def test_bid_requests_for_other_owner_forbidden(self, client, login):
        login("b@x.com")
        assert client.get("/bid-request/a@x.com").status_code == 403

    def test_my_bids_for_other_bidder_forbidden(self, client, login):
        login("a@x.com")
        assert client.get("/my-bids/b@x.com").status_code == 403


class TestBidStatus:
    """Job owners move bids through statuses."""

    def test_owner_updates_status(self, client, login, bid_payload):
        bid_id = place_bid(client, bid_payload())
        login("a@x.com")

        response = client.patch(f"/bid/{bid_id}", json={"status": "In Progress"})

        assert response.status_code == 200
        result = response.json()
        assert result["matchedCount"] == 1
        assert result["modifiedCount"] == 1

        bids = client.get("/bid-request/a@x.com").json()
        assert bids[0]["status"] == "In Progress"

    def test_extra_fields_are_merged(self, client, login, bid_payload):
        bid_id = place_bid(client, bid_payload())
        login("a@x.com")

        client.patch(f"/bid/{bid_id}", json={"status": "Rejected", "reason": "budget"})

        bid = client.get("/bid-request/a@x.com").json()[0]
        assert bid["status"] == "Rejected"
        assert bid["reason"] == "budget"
        assert bid["comment"] == "I can do this in two days"

    def test_unknown_bid_is_noop(self, client, login):
        login("a@x.com")

        response = client.patch(f"/bid/{ObjectId()}", json={"status": "Rejected"})

        assert response.status_code == 200
        assert response.json()["matchedCount"] == 0
        assert response.json()["modifiedCount"] == 0

    def test_bidder_cannot_update_status(self, client, login, bid_payload):
        bid_id = place_bid(client, bid_payload())
        login("b@x.com")

        response = client.patch(f"/bid/{bid_id}", json={"status": "Complete"})

        assert response.status_code == 403

    def test_status_required(self, client, login, bid_payload):
        bid_id = place_bid(client, bid_payload())
        login("a@x.com")

        response = client.patch(f"/bid/{bid_id}", json={"reason": "no status"})

        assert response.status_code == 422

    def test_malformed_bid_id(self, client, login):
        login("a@x.com")
        response = client.patch("/bid/nope", json={"status": "Rejected"})
        assert response.status_code == 400
