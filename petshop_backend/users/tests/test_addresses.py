# users/tests/test_addresses.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from users.models import Address

User = get_user_model()


def _payload(**overrides):
    data = {
        "full_name": "Rafi Ahmed",
        "phone": "01711111111",
        "line1": "House 12, Road 5",
        "city": "Dhaka",
    }
    data.update(overrides)
    return data


class AddressBookTests(TestCase):
    """
    GUARANTEES:
    - First address becomes default
    - Exactly one default per user
    - Deleting the default promotes the most recent remaining address
    - Addresses are owner-scoped
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="addr@example.com", password="x")
        self.client.force_authenticate(user=self.user)

    def test_first_address_is_default(self):
        res = self.client.post("/api/auth/addresses/", _payload())
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(res.data["is_default"])

        res = self.client.post("/api/auth/addresses/", _payload(label="work"))
        self.assertFalse(res.data["is_default"])

    def test_new_default_clears_old(self):
        first = self.client.post("/api/auth/addresses/", _payload()).data
        second = self.client.post("/api/auth/addresses/", _payload(is_default=True)).data

        self.assertTrue(second["is_default"])
        self.assertFalse(Address.objects.get(pk=first["id"]).is_default)
        self.assertEqual(Address.objects.filter(user=self.user, is_default=True).count(), 1)

    def test_set_default_endpoint(self):
        self.client.post("/api/auth/addresses/", _payload())
        other = self.client.post("/api/auth/addresses/", _payload(city="Chittagong")).data

        res = self.client.post(f"/api/auth/addresses/{other['id']}/set-default/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["is_default"])
        self.assertEqual(Address.objects.filter(user=self.user, is_default=True).count(), 1)

    def test_deleting_default_promotes_most_recent(self):
        default = self.client.post("/api/auth/addresses/", _payload()).data
        self.client.post("/api/auth/addresses/", _payload(city="Sylhet"))
        newest = self.client.post("/api/auth/addresses/", _payload(city="Khulna")).data

        res = self.client.delete(f"/api/auth/addresses/{default['id']}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

        self.assertTrue(Address.objects.get(pk=newest["id"]).is_default)

    def test_other_users_address_is_404(self):
        stranger = User.objects.create_user(email="other@example.com", password="x")
        foreign = Address.objects.create(user=stranger, is_default=True, **_payload())

        res = self.client.get(f"/api/auth/addresses/{foreign.id}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
