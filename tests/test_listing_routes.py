from __future__ import annotations

import os
import shutil
import tempfile
import unittest

from fastapi.testclient import TestClient
from google.api_core import exceptions as gexc

from fakes import FakeFirestore
from LISTINGS.core.store import ListingStore
from LISTINGS.main import create_app

HOUSE_FORM = {
    "title": "Two bedroom flat",
    "location": "Woodlands",
    "rent": "3500",
    "latitude": "-15.43",
    "longitude": "28.32",
    "description": "Close to the shops",
}

FOOD_FORM = {
    "title": "Fresh samosas",
    "location": "Kamwala",
    "latitude": "-15.44",
    "longitude": "28.29",
    "description": "Hot every morning",
}

JPEG = b"\xff\xd8\xff\xe0fake-jpeg-bytes"


class ListingRoutesTestCase(unittest.TestCase):
    def setUp(self):
        self.upload_dir = tempfile.mkdtemp(prefix="listings-uploads-")
        self.db = FakeFirestore()
        self.app = create_app(store=ListingStore(self.db), upload_dir=self.upload_dir)
        self.client = TestClient(self.app)

    def tearDown(self):
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def _houses(self):
        return [data for _, data in self.db.collection("houses").docs]

    # ---------------------------
    # Pages
    # ---------------------------
    def test_landing_defaults(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["searchAction"], "/food")
        self.assertEqual(body["selectedType"], "food")
        self.assertEqual(body["query"], "")
        self.assertEqual(body["categories"], ["food", "house", "market"])

    def test_landing_echoes_type_and_query(self):
        body = self.client.get("/", params={"type": "market", "query": "bike"}).json()
        self.assertEqual(body["selectedType"], "market")
        self.assertEqual(body["query"], "bike")

    def test_blank_form(self):
        res = self.client.get("/market/form")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["routeName"], "market")
        self.assertEqual(body["errors"], [])
        self.assertEqual(
            body["fields"],
            ["title", "location", "price", "latitude", "longitude", "description", "image"],
        )

    def test_ping(self):
        self.assertEqual(self.client.get("/ping").json(), {"message": "pong"})

    def test_unknown_category_and_route_are_404(self):
        self.assertEqual(self.client.get("/cars").status_code, 404)
        self.assertEqual(self.client.get("/cars/form").status_code, 404)
        self.assertEqual(self.client.post("/cars", data=HOUSE_FORM).status_code, 404)
        self.assertEqual(self.client.get("/food/form/extra").status_code, 404)

    def test_undefined_methods_are_404(self):
        for res in (
            self.client.post("/", data=HOUSE_FORM),
            self.client.delete("/food"),
            self.client.put("/house/form"),
            self.client.patch("/ping"),
        ):
            self.assertEqual(res.status_code, 404)
            self.assertEqual(res.json(), {"detail": "Not Found"})

    def test_placeholder_images_are_served(self):
        for category in ("food", "house", "market"):
            imagepath = self.client.get(f"/{category}").json()["imagepath"]
            res = self.client.get(imagepath)
            self.assertEqual(res.status_code, 200)
            self.assertEqual(res.headers["content-type"], "image/svg+xml")

    # ---------------------------
    # Search
    # ---------------------------
    def test_search_empty_collection(self):
        res = self.client.get("/house")
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["cards"], [])
        self.assertEqual(body["query"], "")
        self.assertEqual(body["selectedType"], "house")
        self.assertEqual(body["searchAction"], "/house")
        self.assertEqual(body["imagepath"], "/static/house.svg")
        self.assertEqual(body["domain"], "testserver")

    def test_search_no_match_is_success(self):
        self.client.post("/house", data=HOUSE_FORM, follow_redirects=False)
        res = self.client.get("/house", params={"query": "zzz_no_such_text"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["cards"], [])
        self.assertEqual(res.json()["query"], "zzz_no_such_text")

    def test_cards_omit_other_categories_numbers(self):
        self.client.post("/house", data=HOUSE_FORM, follow_redirects=False)
        self.client.post("/food", data=FOOD_FORM, follow_redirects=False)
        house = self.client.get("/house").json()["cards"][0]
        food = self.client.get("/food").json()["cards"][0]
        self.assertEqual(house["rent"], 3500.0)
        self.assertNotIn("price", house)
        self.assertNotIn("rent", food)
        self.assertNotIn("price", food)

    def test_unreadable_document_does_not_break_search(self):
        self.client.post("/food", data=FOOD_FORM, follow_redirects=False)
        self.db.collection("foods").add({"title": "Nshima", "location": "Chilenje"})
        res = self.client.get("/food")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([c["title"] for c in res.json()["cards"]], [FOOD_FORM["title"]])

    def test_search_store_failure_is_generic_500(self):
        self.db.fail_on["stream"] = gexc.ServiceUnavailable("backend 10.0.0.3 unreachable")
        res = self.client.get("/food", params={"query": "x"})
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json(), {"detail": "Internal Server Error"})

    # ---------------------------
    # Create
    # ---------------------------
    def test_create_with_image_redirects_and_persists(self):
        res = self.client.post(
            "/house",
            data=HOUSE_FORM,
            files={"image": ("front door.jpg", JPEG, "image/jpeg")},
            follow_redirects=False,
        )
        self.assertEqual(res.status_code, 303)
        self.assertEqual(res.headers["location"], "/house")

        houses = self._houses()
        self.assertEqual(len(houses), 1)
        image = houses[0]["image"]
        self.assertTrue(image.startswith("uploads/"))
        self.assertTrue(image.endswith("-front_door.jpg"))
        self.assertEqual(houses[0]["rent"], 3500.0)

        saved = os.path.join(self.upload_dir, os.path.basename(image))
        with open(saved, "rb") as f:
            self.assertEqual(f.read(), JPEG)

        served = self.client.get("/" + image)
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, JPEG)

        cards = self.client.get("/house", params={"query": "WOODLANDS"}).json()["cards"]
        self.assertEqual(len(cards), 1)
        self.assertEqual(cards[0]["image"], image)
        self.assertEqual(cards[0]["latitude"], "-15.43")

    def test_create_without_image(self):
        res = self.client.post("/house", data=HOUSE_FORM, follow_redirects=False)
        self.assertEqual(res.status_code, 303)
        self.assertEqual(self._houses()[0]["image"], "")
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_create_from_json_body(self):
        payload = {**HOUSE_FORM, "rent": 4200, "latitude": -15.4}
        res = self.client.post("/house", json=payload, follow_redirects=False)
        self.assertEqual(res.status_code, 303)
        stored = self._houses()[0]
        self.assertEqual(stored["rent"], 4200.0)
        self.assertEqual(stored["latitude"], "-15.4")

    def test_validation_failure_is_400_with_ordered_errors(self):
        res = self.client.post(
            "/house",
            data={**HOUSE_FORM, "title": "", "rent": "abc"},
            files={"image": ("room.png", b"png-bytes", "image/png")},
            follow_redirects=False,
        )
        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body["routeName"], "house")
        self.assertEqual([e["field"] for e in body["errors"]], ["title", "rent"])
        self.assertEqual(body["errors"][1]["message"], "Rent must be a valid number")
        self.assertEqual(self._houses(), [])
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_non_image_upload_rejected_with_field_errors(self):
        res = self.client.post(
            "/market",
            data={"title": "Bike", "location": "Matero", "latitude": "1", "longitude": "2", "description": "Red"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
            follow_redirects=False,
        )
        self.assertEqual(res.status_code, 400)
        fields = [e["field"] for e in res.json()["errors"]]
        self.assertEqual(fields, ["price", "image"])
        self.assertEqual(self.db.collection("markets").docs, [])
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_store_failure_on_create_is_generic_500(self):
        self.db.fail_on["add"] = gexc.DeadlineExceeded("deadline")
        res = self.client.post(
            "/house",
            data=HOUSE_FORM,
            files={"image": ("a.jpg", JPEG, "image/jpeg")},
            follow_redirects=False,
        )
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json(), {"detail": "Internal Server Error"})
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_house_never_shows_up_in_other_categories(self):
        self.client.post("/house", data=HOUSE_FORM, follow_redirects=False)
        for category in ("food", "market"):
            cards = self.client.get(f"/{category}", params={"query": HOUSE_FORM["title"]}).json()["cards"]
            self.assertEqual(cards, [])


class AppLifecycleTestCase(unittest.TestCase):
    def test_injected_store_is_not_closed_on_shutdown(self):
        upload_dir = tempfile.mkdtemp(prefix="listings-uploads-")
        try:
            db = FakeFirestore()
            app = create_app(store=ListingStore(db), upload_dir=upload_dir)
            with TestClient(app) as client:
                self.assertEqual(client.get("/food").status_code, 200)
            self.assertFalse(db.closed)
        finally:
            shutil.rmtree(upload_dir, ignore_errors=True)


if __name__ == "__main__":
    unittest.main()
