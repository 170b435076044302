from app.domains.listings.service import ListingService
from app.domains.nfts.service import NftService
from app.shared.lamports import MAX_LAMPORTS


def _mint(client, headers, name="Alpha"):
    response = client.post("/api/nfts", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]


def _list(client, headers, nft_id, price="1000000000"):
    return client.post(
        "/api/listings", json={"nftId": nft_id, "priceLamports": price}, headers=headers
    )


class TestListingEndpoints:
    def test_requires_token(self, client):
        response = client.get("/api/listings")

        assert response.status_code == 401
        assert response.json() == {
            "status": "error",
            "message": "Missing authorization bearer token",
        }

    def test_create_listing(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        nft = _mint(client, headers)

        response = _list(client, headers, nft["id"])

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["nftId"] == nft["id"]
        assert data["sellerId"] == alice.id
        assert data["priceLamports"] == "1000000000"
        assert data["status"] == "ACTIVE"

    def test_price_as_number_is_accepted(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        nft = _mint(client, headers)

        response = _list(client, headers, nft["id"], price=250_000_000)

        assert response.status_code == 201
        assert response.json()["data"]["priceLamports"] == "250000000"

    def test_price_above_safe_integer_as_string(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        nft = _mint(client, headers)

        response = _list(client, headers, nft["id"], price=str(MAX_LAMPORTS))

        assert response.status_code == 201
        assert response.json()["data"]["priceLamports"] == str(MAX_LAMPORTS)

    def test_invalid_prices_are_rejected(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        nft = _mint(client, headers)

        for price in ["0", "-5", "1.5", "abc", 0, -1, 1.5, 2**53, True, str(MAX_LAMPORTS + 1)]:
            response = _list(client, headers, nft["id"], price=price)
            assert response.status_code == 400, price
            body = response.json()
            assert body["status"] == "error"
            assert body["message"] == "Invalid payload"
            assert body["issues"]

    def test_missing_nft_id_is_rejected(self, client, alice, auth_headers):
        response = client.post(
            "/api/listings", json={"priceLamports": "1"}, headers=auth_headers(alice)
        )
        assert response.status_code == 400

    def test_unknown_nft(self, client, alice, auth_headers):
        response = _list(client, auth_headers(alice), 9999)

        assert response.status_code == 404
        assert response.json()["message"] == "NFT not found"

    def test_non_owner_cannot_list(self, client, alice, bob, auth_headers):
        nft = _mint(client, auth_headers(alice))

        response = _list(client, auth_headers(bob), nft["id"])

        assert response.status_code == 403
        assert response.json()["message"] == "Only the owner can list this NFT"

    def test_duplicate_listing(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        nft = _mint(client, headers)
        assert _list(client, headers, nft["id"]).status_code == 201

        response = _list(client, headers, nft["id"], price="2")

        assert response.status_code == 409
        assert response.json()["message"] == "NFT already has an active listing"

    def test_active_listings_board(self, client, db_session, alice, bob, carol, auth_headers, listed_nft):
        nft, listing = listed_nft
        service = ListingService(db_session)
        service.place_bid(listing.id, bob.id, 300_000_000)
        service.place_bid(listing.id, carol.id, 800_000_000)

        response = client.get("/api/listings", headers=auth_headers(bob))

        assert response.status_code == 200
        [entry] = response.json()["data"]
        assert entry["id"] == listing.id
        assert entry["status"] == "ACTIVE"
        assert entry["priceLamports"] == "1000000000"
        assert entry["nft"]["name"] == "Alpha"
        assert entry["nft"]["owner"]["codename"] == "ALICE"
        assert entry["seller"]["principal"] == alice.principal
        assert [b["amountLamports"] for b in entry["bids"]] == ["800000000", "300000000"]
        assert entry["bestBid"]["amountLamports"] == "800000000"
        assert entry["bestBid"]["bidder"]["id"] == carol.id

    def test_best_bid_is_null_without_bids(self, client, bob, auth_headers, listed_nft):
        response = client.get("/api/listings", headers=auth_headers(bob))

        [entry] = response.json()["data"]
        assert entry["bestBid"] is None
        assert entry["bids"] == []

    def test_newest_listing_first(self, client, db_session, alice, auth_headers, listed_nft):
        first_nft, first_listing = listed_nft
        nft = NftService(db_session).mint_nft_for_user(alice.id, "Omega")
        second_listing = ListingService(db_session).create_listing(nft.id, 7, alice.id)

        response = client.get("/api/listings", headers=auth_headers(alice))

        ids = [entry["id"] for entry in response.json()["data"]]
        assert ids == [second_listing.id, first_listing.id]


class TestPurchaseEndpoint:
    def test_purchase(self, client, bob, auth_headers, listed_nft):
        nft, listing = listed_nft
        headers = auth_headers(bob)

        response = client.post(f"/api/listings/{listing.id}/purchase", headers=headers)

        assert response.status_code == 204
        assert response.content == b""

        mine = client.get("/api/nfts/mine", headers=headers).json()["data"]
        assert [n["id"] for n in mine] == [nft.id]
        assert client.get("/api/listings", headers=headers).json()["data"] == []

    def test_purchase_twice(self, client, bob, carol, auth_headers, listed_nft):
        _, listing = listed_nft
        client.post(f"/api/listings/{listing.id}/purchase", headers=auth_headers(bob))

        response = client.post(f"/api/listings/{listing.id}/purchase", headers=auth_headers(carol))

        assert response.status_code == 409
        assert response.json()["message"] == "Listing not available"

    def test_seller_cannot_purchase(self, client, alice, auth_headers, listed_nft):
        _, listing = listed_nft
        response = client.post(f"/api/listings/{listing.id}/purchase", headers=auth_headers(alice))
        assert response.status_code == 403

    def test_purchase_unknown_listing(self, client, bob, auth_headers):
        response = client.post("/api/listings/4242/purchase", headers=auth_headers(bob))
        assert response.status_code == 404


class TestBidEndpoints:
    def test_place_bid(self, client, bob, auth_headers, listed_nft):
        nft, listing = listed_nft

        response = client.post(
            f"/api/listings/{listing.id}/bids",
            json={"amountLamports": "500000000"},
            headers=auth_headers(bob),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["listingId"] == listing.id
        assert data["nftId"] == nft.id
        assert data["amountLamports"] == "500000000"
        assert data["status"] == "ACTIVE"
        assert data["bidder"]["codename"] == "BOB"

    def test_owner_cannot_bid(self, client, alice, auth_headers, listed_nft):
        _, listing = listed_nft
        response = client.post(
            f"/api/listings/{listing.id}/bids",
            json={"amountLamports": 10},
            headers=auth_headers(alice),
        )
        assert response.status_code == 403

    def test_invalid_bid_amount(self, client, bob, auth_headers, listed_nft):
        _, listing = listed_nft
        response = client.post(
            f"/api/listings/{listing.id}/bids",
            json={"amountLamports": "zero"},
            headers=auth_headers(bob),
        )
        assert response.status_code == 400

    def test_accept_bid_flow(self, client, alice, bob, carol, auth_headers, listed_nft):
        nft, listing = listed_nft
        winning = client.post(
            f"/api/listings/{listing.id}/bids",
            json={"amountLamports": "500000000"},
            headers=auth_headers(bob),
        ).json()["data"]
        client.post(
            f"/api/listings/{listing.id}/bids",
            json={"amountLamports": "100000000"},
            headers=auth_headers(carol),
        )

        response = client.post(
            f"/api/listings/{listing.id}/bids/{winning['id']}/accept", headers=auth_headers(alice)
        )
        assert response.status_code == 204

        bids = client.get(f"/api/nfts/{nft.id}/bids", headers=auth_headers(alice)).json()["data"]
        statuses = {b["bidder"]: b["status"] for b in bids}
        assert statuses == {"BOB": "ACCEPTED", "AGENT-0003": "CANCELLED"}

        details = client.get(f"/api/nfts/{nft.id}", headers=auth_headers(bob)).json()["data"]
        assert details["owner"]["principal"] == bob.principal
        assert details["creator"]["principal"] == alice.principal

    def test_non_seller_cannot_accept(self, client, bob, auth_headers, listed_nft, db_session):
        _, listing = listed_nft
        bid = ListingService(db_session).place_bid(listing.id, bob.id, 5)

        response = client.post(
            f"/api/listings/{listing.id}/bids/{bid.id}/accept", headers=auth_headers(bob)
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Only the seller can accept bids"

    def test_accept_unknown_bid(self, client, alice, auth_headers, listed_nft):
        _, listing = listed_nft
        response = client.post(
            f"/api/listings/{listing.id}/bids/31337/accept", headers=auth_headers(alice)
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Bid not found for this listing"
