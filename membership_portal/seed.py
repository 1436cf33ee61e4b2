"""Factory-default records used when a collection is missing from storage"""

from datetime import date, timedelta
from typing import List

from membership_portal.auth.passwords import hash_password
from membership_portal.models.user import MembershipCategory, MembershipStatus, UserRole


def _relative(today: date, days: int) -> str:
    return (today + timedelta(days=days)).isoformat()


def default_users(
    today: date,
    admin_email: str = "admin@ran.org.ng",
    admin_password: str = "Admin@123",
    member_password: str = "Password@123",
) -> List[dict]:
    admin_hash = hash_password(admin_password)
    member_hash = hash_password(member_password)

    def member(**fields) -> dict:
        record = {
            "role": UserRole.MEMBER.value,
            "password_hash": member_hash,
            "gender": None,
            "dob": None,
            "business_city": None,
            "business_commencement": None,
            "business_category": None,
            "areas_of_interest": [],
            "related_association": None,
            "related_association_name": None,
            "profile_image": None,
            "documents": {},
        }
        record.update(fields)
        return record

    return [
        member(
            id="admin-1",
            first_name="Admin",
            last_name="User",
            email=admin_email,
            phone="08000000000",
            role=UserRole.ADMIN.value,
            password_hash=admin_hash,
            status=MembershipStatus.ACTIVE.value,
            category=MembershipCategory.HONORARY.value,
            business_name="RAN HQ",
            business_address="Abuja",
            business_state="FCT",
            states_of_operation="All",
            material_types=[],
            machinery_deployed=[],
            monthly_volume="0",
            employees=10,
            date_joined="2020-01-01",
            expiry_date="2099-12-31",
        ),
        member(
            id="user-1",
            first_name="Chinedu",
            last_name="Okafor",
            email="chinedu@ecolife.com",
            phone="08012345678",
            status=MembershipStatus.ACTIVE.value,
            category=MembershipCategory.CORPORATE.value,
            business_name="EcoLife Recycling Ltd",
            business_address="15 Ikeja Way, Lagos",
            business_state="Lagos",
            business_category="Aggregator",
            states_of_operation="Lagos, Ogun",
            material_types=["PET Plastics", "Metals"],
            machinery_deployed=["Baler", "Crusher"],
            monthly_volume="50",
            employees=25,
            date_joined="2023-05-15",
            expiry_date=_relative(today, 15),
        ),
        member(
            id="user-2",
            first_name="Amina",
            last_name="Bello",
            email="amina@greenearth.ng",
            phone="08098765432",
            status=MembershipStatus.PENDING.value,
            category=MembershipCategory.ASSOCIATE.value,
            business_name="Green Earth Solutions",
            business_address="Kano City",
            business_state="Kano",
            business_category="Lastmile Collector",
            states_of_operation="Kano",
            material_types=["Paper", "Cartons"],
            machinery_deployed=["None"],
            monthly_volume="5",
            employees=5,
            date_joined="2024-08-20",
            expiry_date=_relative(today, 365),
        ),
        member(
            id="user-3",
            first_name="Tunde",
            last_name="Bakare",
            email="tunde@metalworks.ng",
            phone="08055555555",
            status=MembershipStatus.ACTIVE.value,
            category=MembershipCategory.CORPORATE.value,
            business_name="Lagos Metal Works",
            business_address="Apapa, Lagos",
            business_state="Lagos",
            business_category="Processor",
            states_of_operation="Lagos",
            material_types=["Metals", "UBC"],
            machinery_deployed=["Crusher"],
            monthly_volume="100",
            employees=40,
            date_joined="2022-01-10",
            expiry_date=_relative(today, -5),
        ),
    ]


def default_payments() -> List[dict]:
    return [
        {
            "id": "pay-1",
            "user_id": "user-1",
            "amount": 100000,
            "currency": "NGN",
            "date": "2023-05-15",
            "description": "Corporate Membership Registration",
            "status": "Successful",
            "reference": "REF-123456",
            "receipt": None,
        },
        {
            "id": "pay-2",
            "user_id": "user-1",
            "amount": 80000,
            "currency": "NGN",
            "date": "2024-05-10",
            "description": "Corporate Membership Renewal",
            "status": "Successful",
            "reference": "REF-789012",
            "receipt": None,
        },
    ]


def default_announcements() -> List[dict]:
    # Stored oldest first; listings reverse insertion order
    return [
        {
            "id": "1",
            "title": "Annual General Meeting",
            "content": "The AGM is scheduled for October 15th at the Lagos Civic Center. "
                       "Attendance is mandatory for Corporate members.",
            "date": "2024-09-01",
            "is_important": True,
        },
        {
            "id": "2",
            "title": "New Policy on PET Recycling",
            "content": "The government has released new guidelines regarding PET bottle collection "
                       "standards. Please review the document in the resources section.",
            "date": "2024-09-10",
            "is_important": False,
        },
        {
            "id": "3",
            "title": "Grant Opportunity for Aggregators",
            "content": "Applications are now open for the Green Fund Grant aimed at supporting "
                       "aggregators to scale their operations.",
            "date": "2024-09-12",
            "is_important": True,
        },
    ]
