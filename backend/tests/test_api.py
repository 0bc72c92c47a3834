from unittest.mock import AsyncMock, MagicMock

from bson import ObjectId

from motormingle.main import app
from motormingle.mongo import (
    BIDS_COLLECTION,
    FEEDBACK_COLLECTION,
    LISTINGS_COLLECTION,
    USERS_COLLECTION,
    get_mongo_db,
)
from motormingle.services.access import decode_token
from motormingle.services.bid_ledger import BidLedger
from motormingle.services.listing_service import ListingService, get_listing_service


def _insert(run, mdb, collection, *docs):
    res = run(mdb[collection].insert_many([dict(d) for d in docs]))
    return [str(i) for i in res.inserted_ids]


def _find(run, mdb, collection, query=None):
    return run(mdb[collection].find(query or {}).to_list(length=None))


def test_liveness_probe(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Motor Mingle Server is running fine"


def test_issue_token(client):
    r = client.post("/jwt", json={"email": "seller@example.com"})
    assert r.status_code == 200
    assert decode_token(r.json()["token"])["email"] == "seller@example.com"


def test_protected_route_without_credential_is_401(client):
    r = client.post("/newCarSellByUser", json={"sellerEmail": "s@example.com"})
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_protected_route_with_bad_credential_is_401(client):
    r = client.get("/listings/s@example.com", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json() == {"message": "Unauthorized"}


def test_store_unavailable_is_503(client):
    async def _no_store():
        return None

    app.dependency_overrides[get_mongo_db] = _no_store
    r = client.get("/allListings")
    assert r.status_code == 503
    assert r.json() == {"message": "Requires MongoDB"}


def test_new_user_is_idempotent_by_email(client, run, mdb):
    first = client.post("/newUserApi", json={"email": "u@example.com", "userType": "user"})
    assert first.status_code == 200
    assert first.json()["insertedId"]

    second = client.post("/newUserApi", json={"email": "u@example.com", "userType": "admin"})
    assert second.json() == {"message": "User already exists", "insertedId": None}

    users = _find(run, mdb, USERS_COLLECTION)
    assert len(users) == 1
    assert users[0]["userType"] == "user"


def test_admin_check(client, run, mdb, auth_headers):
    _insert(run, mdb, USERS_COLLECTION, {"email": "root@example.com", "userType": "admin"})
    r = client.get("/user/admin/root@example.com", headers=auth_headers())
    assert r.json() == {"admin": True}
    r = client.get("/user/admin/ghost@example.com", headers=auth_headers())
    assert r.json() == {"admin": False}


def test_all_users_is_admin_only(client, run, mdb, auth_headers):
    _insert(
        run, mdb, USERS_COLLECTION,
        {"email": "root@example.com", "userType": "admin"},
        {"email": "a@example.com", "userType": "user"},
        {"email": "b@example.com", "userType": "user"},
    )

    denied = client.get("/allUsers", headers=auth_headers("a@example.com"))
    assert denied.status_code == 403
    assert denied.json() == {"message": "Forbidden access!"}

    unknown = client.get("/allUsers", headers=auth_headers("ghost@example.com"))
    assert unknown.status_code == 403

    ok = client.get("/allUsers", headers=auth_headers("root@example.com"))
    assert ok.status_code == 200
    assert sorted(u["email"] for u in ok.json()) == ["a@example.com", "b@example.com"]


def test_admin_gate_checks_credential_first(client):
    r = client.put("/updateSellerVerification/seller-1", json={"updatedVerifyStatus": "verified"})
    assert r.status_code == 401


def test_current_user(client, run, mdb):
    _insert(run, mdb, USERS_COLLECTION, {"email": "a@example.com", "userType": "user"})
    body = client.get("/currentUser", params={"email": "a@example.com"}).json()
    assert body["email"] == "a@example.com"
    assert isinstance(body["_id"], str)


def test_filtered_listings_floor_bucket(client, run, mdb):
    _insert(
        run, mdb, LISTINGS_COLLECTION,
        {"carName": "one", "carBrand": "toyota", "carCondition": "used", "price": 7000},
        {"carName": "two", "carBrand": "honda", "carCondition": "new", "price": 15000},
    )
    r = client.get(
        "/filteredListings",
        params={"listingPerPage": 10, "currentPage": 1, "carCondition": "all", "carBrand": "all", "carPrice": "8000-9000"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["totalPages"] == 1
    assert [d["carName"] for d in body["filteredListings"]] == ["two"]


def test_filtered_listings_rejects_bad_price_range(client):
    r = client.get("/filteredListings", params={"listingPerPage": 10, "currentPage": 1, "carPrice": "cheap"})
    assert r.status_code == 400
    assert "price range" in r.json()["message"]


def test_filtered_listings_page_beyond_range(client, run, mdb):
    _insert(run, mdb, LISTINGS_COLLECTION, *[{"carName": str(i), "price": 100} for i in range(5)])
    body = client.get("/filteredListings", params={"listingPerPage": 2, "currentPage": 4}).json()
    assert body == {"totalPages": 3, "filteredListings": []}


def test_create_and_read_listing(client, run, mdb, auth_headers):
    r = client.post(
        "/newCarSellByUser",
        json={"sellerEmail": "s@example.com", "sellerId": "seller-1", "carName": "civic", "carBrand": "honda", "price": 12000, "photo": "x.jpg"},
        headers=auth_headers("s@example.com"),
    )
    assert r.status_code == 200
    listing_id = r.json()["insertedId"]

    single = client.get(f"/singleListing/{listing_id}").json()
    assert single["carName"] == "civic"
    assert single["photo"] == "x.jpg"
    assert single["totalBids"] == 0

    mine = client.get("/listings/s@example.com", headers=auth_headers("s@example.com")).json()
    assert [d["_id"] for d in mine] == [listing_id]
    assert len(client.get("/allListings").json()) == 1


def test_single_listing_invalid_id_is_400(client):
    r = client.get("/singleListing/not-an-id")
    assert r.status_code == 400
    assert r.json() == {"message": "invalid id"}


def test_home_slices(client, run, mdb):
    _insert(run, mdb, LISTINGS_COLLECTION, *[{"carName": str(i), "totalBids": i} for i in range(10)])
    home = client.get("/homeListings").json()
    assert [d["carName"] for d in home] == [str(i) for i in range(9, 1, -1)]
    top = client.get("/topBidHomeListings").json()
    assert [d["totalBids"] for d in top] == list(range(9, 1, -1))


def test_bid_flow(client, run, mdb, auth_headers):
    (listing_id,) = _insert(run, mdb, LISTINGS_COLLECTION, {"carName": "civic", "totalBids": 4})

    r = client.post("/newBid", json={"productId": listing_id, "bidderEmail": "b@example.com", "bidAmount": 11000}, headers=auth_headers())
    assert r.status_code == 200
    bid = r.json()
    assert bid["productId"] == listing_id
    assert bid["bidAmount"] == 11000
    assert isinstance(bid["_id"], str)

    listing = client.get(f"/singleListing/{listing_id}").json()
    assert listing["totalBids"] == 5
    bids = client.get(f"/allBidsForProduct/{listing_id}").json()
    assert [b["_id"] for b in bids] == [bid["_id"]]


def test_bid_on_missing_listing(client, run, mdb, auth_headers):
    r = client.post("/newBid", json={"productId": str(ObjectId()), "bidAmount": 1}, headers=auth_headers())
    assert r.status_code == 404
    assert r.json() == {"message": "Listing not found"}
    assert _find(run, mdb, BIDS_COLLECTION) == []


def test_bid_requires_credential(client, run, mdb):
    (listing_id,) = _insert(run, mdb, LISTINGS_COLLECTION, {"carName": "civic", "totalBids": 0})
    r = client.post("/newBid", json={"productId": listing_id})
    assert r.status_code == 401
    assert _find(run, mdb, LISTINGS_COLLECTION)[0]["totalBids"] == 0


def test_update_listing_is_full_replace(client, run, mdb, auth_headers):
    (listing_id,) = _insert(
        run, mdb, LISTINGS_COLLECTION,
        {"carName": "civic", "carBrand": "honda", "price": 12000, "description": "clean", "sellerEmail": "s@example.com"},
    )
    r = client.put(f"/updateListing/{listing_id}", json={"carName": "civic si", "price": 13000}, headers=auth_headers())
    assert r.status_code == 200
    assert r.json()["matchedCount"] == 1

    doc = _find(run, mdb, LISTINGS_COLLECTION)[0]
    assert doc["carName"] == "civic si"
    assert doc["price"] == 13000
    assert doc["carBrand"] is None
    assert doc["description"] is None
    # fields outside the editable set are untouched
    assert doc["sellerEmail"] == "s@example.com"


def test_update_listing_inserts_when_missing(client, run, mdb, auth_headers):
    new_id = str(ObjectId())
    r = client.put(f"/updateListing/{new_id}", json={"carName": "new"}, headers=auth_headers())
    assert r.json()["upsertedId"] == new_id
    assert _find(run, mdb, LISTINGS_COLLECTION)[0]["carName"] == "new"


def test_update_sell_status_requires_credential(client, run, mdb, auth_headers):
    (listing_id,) = _insert(run, mdb, LISTINGS_COLLECTION, {"carName": "civic", "sellStatus": "available"})
    assert client.put(f"/updateSellStatus/{listing_id}", json={"sellStatus": "sold"}).status_code == 401

    r = client.put(f"/updateSellStatus/{listing_id}", json={"sellStatus": "sold"}, headers=auth_headers())
    assert r.json()["modifiedCount"] == 1
    assert _find(run, mdb, LISTINGS_COLLECTION)[0]["sellStatus"] == "sold"


def test_delete_listing(client, run, mdb, auth_headers):
    (listing_id,) = _insert(run, mdb, LISTINGS_COLLECTION, {"carName": "civic"})
    r = client.delete(f"/api/deleteSingleListing/{listing_id}", headers=auth_headers())
    assert r.json() == {"acknowledged": True, "deletedCount": 1}
    assert _find(run, mdb, LISTINGS_COLLECTION) == []


def test_seller_verification_updates_every_listing_of_seller(client, run, mdb, auth_headers):
    _insert(run, mdb, USERS_COLLECTION, {"email": "root@example.com", "userType": "admin"})
    _insert(
        run, mdb, LISTINGS_COLLECTION,
        {"carName": "a", "sellerId": "seller-1"},
        {"carName": "b", "sellerId": "seller-1"},
        {"carName": "c", "sellerId": "seller-2"},
    )
    r = client.put(
        "/updateSellerVerification/seller-1",
        json={"updatedVerifyStatus": "verified"},
        headers=auth_headers("root@example.com"),
    )
    assert r.json()["modifiedCount"] == 2
    status = {d["carName"]: d.get("sellerVerificationStatus") for d in _find(run, mdb, LISTINGS_COLLECTION)}
    assert status == {"a": "verified", "b": "verified", "c": None}


def test_seller_verification_forbidden_for_users(client, run, mdb, auth_headers):
    _insert(run, mdb, USERS_COLLECTION, {"email": "a@example.com", "userType": "user"})
    r = client.put("/updateSellerVerification/seller-1", json={"updatedVerifyStatus": "verified"}, headers=auth_headers("a@example.com"))
    assert r.status_code == 403


def test_update_user_details_merges_present_fields(client, run, mdb, auth_headers):
    (user_id,) = _insert(
        run, mdb, USERS_COLLECTION,
        {"email": "a@example.com", "userType": "user", "phone": "111", "address": "Old Road"},
    )
    r = client.put(f"/updateUserDetails/{user_id}", json={"phone": "222", "requestUpdate": "requested"}, headers=auth_headers())
    assert r.status_code == 200

    user = _find(run, mdb, USERS_COLLECTION)[0]
    assert user["phone"] == "222"
    assert user["verificationRequest"] == "requested"
    assert user["address"] == "Old Road"
    assert "verifyStatus" not in user


def test_update_user_details_with_nothing_to_merge(client, run, mdb, auth_headers):
    (user_id,) = _insert(run, mdb, USERS_COLLECTION, {"email": "a@example.com", "phone": "111"})
    r = client.put(f"/updateUserDetails/{user_id}", json={"phone": ""}, headers=auth_headers())
    assert r.json() == {"acknowledged": True, "matchedCount": 1, "modifiedCount": 0, "upsertedId": None}
    assert _find(run, mdb, USERS_COLLECTION)[0]["phone"] == "111"


def test_saved_ads(client, run, mdb):
    r = client.post("/newSavedAd", json={"singleAdId": "ad-1", "userEmail": "a@example.com", "carName": "civic"})
    assert r.status_code == 200
    client.post("/newSavedAd", json={"singleAdId": "ad-2", "userEmail": "b@example.com"})

    single = client.get("/getSingleSavedAd/ad-1", params={"email": "a@example.com"}).json()
    assert single["carName"] == "civic"
    assert client.get("/getSingleSavedAd/ad-1", params={"email": "b@example.com"}).json() is None
    assert [d["singleAdId"] for d in client.get("/savedAdsList/a@example.com").json()] == ["ad-1"]

    removed = client.delete("/removedSavedAd/ad-1", params={"email": "a@example.com"}).json()
    assert removed["deletedCount"] == 1
    assert client.get("/savedAdsList/a@example.com").json() == []


def test_feedback_latest_five(client, run, mdb):
    for i in range(7):
        client.post("/userFeedback", json={"feedbackBy": f"user-{i}", "message": f"m{i}"})
    latest = client.get("/allFeedbacks").json()
    assert [d["message"] for d in latest] == ["m6", "m5", "m4", "m3", "m2"]
    assert client.get("/singleFeedback/user-3").json()["message"] == "m3"
    assert len(_find(run, mdb, FEEDBACK_COLLECTION)) == 7


def test_health(client):
    assert client.get("/health/").json() == {"status": "ok"}


def test_bid_conflict_answers_false(client, run, mdb, auth_headers):
    oid = ObjectId()
    listings = MagicMock()
    listings.find_one = AsyncMock(return_value={"_id": oid})
    listings.find_one_and_update = AsyncMock(return_value=None)

    async def _service():
        svc = ListingService(mdb)
        svc.ledger = BidLedger(listings, mdb[BIDS_COLLECTION])
        return svc

    app.dependency_overrides[get_listing_service] = _service
    r = client.post("/newBid", json={"productId": str(oid), "bidAmount": 5000}, headers=auth_headers())

    assert r.status_code == 200
    assert r.json() is False
    assert _find(run, mdb, BIDS_COLLECTION) == []


def test_filtered_listings_rejects_non_numeric_paging(client):
    r = client.get("/filteredListings", params={"listingPerPage": "ten", "currentPage": 1})
    assert r.status_code == 400
    assert r.json() == {"message": "listingPerPage must be an integer"}

    r = client.get("/filteredListings", params={"listingPerPage": 10, "currentPage": "first"})
    assert r.status_code == 400
    assert r.json() == {"message": "currentPage must be an integer"}


def test_filtered_listings_requires_page_size(client):
    r = client.get("/filteredListings", params={"currentPage": 1})
    assert r.status_code == 400
    assert r.json() == {"message": "listingPerPage is required"}
