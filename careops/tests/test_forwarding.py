"""
Forwarding to hospitals and hospital responses.

The forwarding workflow must only act on pending requests and leave
every row untouched when it refuses.
"""
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import AdminMetadata, AmbulanceRequest, HospitalProfile, HospitalServiceRequest, User


def make_hospital(username, name, state, phone="0484000000", **user_kw):
    user = User.objects.create_user(username=username, email=f"{username}@example.com", password="pass1234",
                                    role="hospital", full_name=name, **user_kw)
    HospitalProfile.objects.create(user=user, hospital_name=name, state=state, district="Central",
                                   phone_number=phone, number_of_ambulances=2)
    return user


class ForwardingTests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.admin = User.objects.create_user(username="admin1", email="admin1@example.com",
                                              password="pass1234", role="admin", full_name="Admin")
        self.staff = User.objects.create_user(username="staff1", email="staff1@example.com",
                                              password="pass1234", role="staff")
        self.customer = User.objects.create_user(username="cust1", email="cust1@example.com",
                                                 password="pass1234", role="customer", full_name="Ravi")
        self.hospital = make_hospital("hosp1", "City General", "Kerala", phone="0484123456")
        self.other_hospital = make_hospital("hosp2", "Lakeside", "Kerala")
        self.req = AmbulanceRequest.objects.create(
            customer=self.customer, pickup_address="12 Beach Road", destination_address="City General",
            emergency_type="Stroke", contact_number="9000000000", priority="critical",
        )

    def authenticate(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def forward(self, user=None, **data):
        payload = {"requestId": self.req.id, "hospitalId": self.hospital.id}
        payload.update(data)
        return self.authenticate(user or self.admin).post("/api/ambulance/forward-to-hospital", payload)

    def test_forward_creates_service_request(self):
        response = self.forward()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        hsr = HospitalServiceRequest.objects.get(id=response.data["serviceRequestId"])
        self.assertEqual(hsr.hospital, self.hospital)
        self.assertEqual(hsr.customer, self.customer)
        self.assertEqual(hsr.admin, self.admin)
        self.assertEqual(hsr.service_type, "Ambulance Request")
        self.assertEqual(hsr.description, "Emergency ambulance request - Stroke")
        self.assertEqual(hsr.priority, "critical")
        self.assertEqual(hsr.status, "pending")
        self.assertEqual(response.data["hospital"], {"id": self.hospital.id, "name": "City General",
                                                     "phone": "0484123456"})

        self.req.refresh_from_db()
        self.assertEqual(self.req.status, "forwarded_to_hospital")
        self.assertEqual(self.req.forwarded_to_hospital, self.hospital)
        self.assertEqual(self.req.hospital_request, hsr)
        self.assertTrue(self.req.is_read)
        self.assertIsNotNone(self.req.updated_at)

    def test_forward_requires_admin(self):
        response = self.forward(user=self.staff)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_forward_missing_fields(self):
        response = self.authenticate(self.admin).post("/api/ambulance/forward-to-hospital", {"requestId": self.req.id})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Missing required fields: requestId, hospitalId")

    def test_forward_unknown_rows(self):
        response = self.forward(requestId=999999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Ambulance request not found")
        response = self.forward(hospitalId=self.customer.id)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Hospital not found")

    def test_forward_non_pending_changes_nothing(self):
        self.assertEqual(self.forward().status_code, status.HTTP_201_CREATED)
        self.req.refresh_from_db()
        before = (self.req.status, self.req.forwarded_to_hospital_id, self.req.hospital_request_id, self.req.updated_at)

        response = self.forward(hospitalId=self.other_hospital.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.req.refresh_from_db()
        after = (self.req.status, self.req.forwarded_to_hospital_id, self.req.hospital_request_id, self.req.updated_at)
        self.assertEqual(before, after)
        self.assertEqual(HospitalServiceRequest.objects.count(), 1)

    def test_hospital_lists_own_requests(self):
        self.forward()
        response = self.authenticate(self.hospital).get("/api/hospital/service-requests")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 1)
        row = response.data["requests"][0]
        self.assertEqual(row["customer_name"], "Ravi")
        self.assertEqual(row["admin_name"], "Admin")
        self.assertEqual(row["pickup_address"], "12 Beach Road")
        self.assertEqual(row["request_priority"], "critical")

        response = self.authenticate(self.other_hospital).get("/api/hospital/service-requests")
        self.assertEqual(response.data["total"], 0)
        response = self.authenticate(self.admin).get("/api/hospital/service-requests")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_accept(self):
        hsr_id = self.forward().data["serviceRequestId"]
        response = self.authenticate(self.hospital).post(
            f"/api/hospital/service-requests/{hsr_id}/accept", {"notes": "Unit 2 dispatched"}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        hsr = HospitalServiceRequest.objects.get(id=hsr_id)
        self.assertEqual((hsr.status, hsr.hospital_response, hsr.notes), ("accepted", "ACCEPTED", "Unit 2 dispatched"))
        self.assertIsNotNone(hsr.hospital_response_at)
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, "assigned")

    def test_accept_is_owner_only(self):
        hsr_id = self.forward().data["serviceRequestId"]
        response = self.authenticate(self.other_hospital).post(f"/api/hospital/service-requests/{hsr_id}/accept")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "You cannot accept requests for other hospitals")
        response = self.authenticate(self.hospital).post("/api/hospital/service-requests/999999/accept")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_reject_leaves_ambulance_request_forwarded(self):
        hsr_id = self.forward().data["serviceRequestId"]
        response = self.authenticate(self.hospital).post(f"/api/hospital/service-requests/{hsr_id}/reject")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        hsr = HospitalServiceRequest.objects.get(id=hsr_id)
        self.assertEqual((hsr.status, hsr.hospital_response), ("rejected", "REJECTED"))
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, "forwarded_to_hospital")
        self.assertEqual(self.req.forwarded_to_hospital_id, self.hospital.id)
        self.assertEqual(self.req.hospital_request_id, hsr_id)
        self.assertTrue(self.req.is_read)

    def test_rejected_request_can_be_forwarded_again(self):
        hsr_id = self.forward().data["serviceRequestId"]
        self.authenticate(self.hospital).post(f"/api/hospital/service-requests/{hsr_id}/reject")
        response = self.forward(hospitalId=self.other_hospital.id)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.req.refresh_from_db()
        self.assertEqual(self.req.forwarded_to_hospital_id, self.other_hospital.id)
        self.assertEqual(self.req.hospital_request_id, response.data["serviceRequestId"])

    def test_deleting_hospital_releases_forwarded_request(self):
        self.forward()
        response = self.authenticate(self.admin).delete(f"/api/admin/users/{self.hospital.id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(HospitalServiceRequest.objects.count(), 0)
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, "pending")
        self.assertIsNone(self.req.forwarded_to_hospital_id)
        self.assertIsNone(self.req.hospital_request_id)
        self.assertFalse(self.req.is_read)

        response = self.forward(hospitalId=self.other_hospital.id)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_answered_request_cannot_be_answered_again(self):
        hsr_id = self.forward().data["serviceRequestId"]
        client = self.authenticate(self.hospital)
        self.assertEqual(client.post(f"/api/hospital/service-requests/{hsr_id}/accept").status_code, 200)
        response = client.post(f"/api/hospital/service-requests/{hsr_id}/reject")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, "assigned")


class HospitalDirectoryTests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.system_admin = User.objects.create_user(username="sys", email="sys@example.com",
                                                     password="pass1234", role="admin")
        self.state_admin = User.objects.create_user(username="kl", email="kl@example.com",
                                                    password="pass1234", role="admin")
        AdminMetadata.objects.create(user=self.state_admin, state="Kerala", district="Ernakulam")
        self.b = make_hospital("hb", "Bravo Hospital", "Kerala")
        self.a = make_hospital("ha", "Alpha Hospital", "Kerala")
        self.t = make_hospital("ht", "Tamil Care", "Tamil Nadu")
        make_hospital("hs", "Suspended Clinic", "Kerala", status="suspended", is_active=False)

    def get(self, user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client.get("/api/ambulance/hospitals")

    def test_system_admin_sees_all_active(self):
        response = self.get(self.system_admin)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["isSystemAdmin"])
        self.assertIsNone(response.data["adminState"])
        self.assertEqual([h["id"] for h in response.data["hospitals"]], [self.a.id, self.b.id, self.t.id])

    def test_state_admin_sees_own_state(self):
        response = self.get(self.state_admin)
        self.assertFalse(response.data["isSystemAdmin"])
        self.assertEqual(response.data["adminState"], "Kerala")
        self.assertEqual(response.data["adminDistrict"], "Ernakulam")
        self.assertEqual([h["hospital_name"] for h in response.data["hospitals"]],
                         ["Alpha Hospital", "Bravo Hospital"])
        self.assertEqual(response.data["total"], 2)

    def test_suspending_hospital_refreshes_directory(self):
        self.assertEqual(self.get(self.state_admin).data["total"], 2)
        client = APIClient()
        client.force_authenticate(user=self.system_admin)
        self.assertEqual(client.post(f"/api/admin/users/{self.a.id}/suspend").status_code, 200)
        self.assertEqual([h["id"] for h in self.get(self.state_admin).data["hospitals"]], [self.b.id])

    def test_non_admin_forbidden(self):
        response = self.get(self.a)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
