"""Seed rows bundled with the application.

Seeds are always present in every workspace, are never written to storage
and can't be edited or deleted. Ids are the fixed strings "1", "2", ...
per entity type; user rows get timestamp ids so the two never collide.
"""

DEFAULT_COMPANIES = [
    {
        "id": "1", "name": "ABC Construction Ltd", "code": "ACL001",
        "address": "12 Industrial Estate, Pune, MH 411001",
        "registrationNo": "U45200MH2009PTC190001",
        "logo": "https://ui-avatars.com/api/?name=ABC+Construction&background=6366f1&color=fff&size=64",
        "status": "Active", "projects": 0, "employees": 120,
        "createdAt": "2023-06-01T00:00:00.000Z",
    },
    {
        "id": "2", "name": "XYZ Builders Inc", "code": "XBI002",
        "address": "88 Ring Road, Bengaluru, KA 560001",
        "registrationNo": "U45309KA2012PTC061234",
        "logo": "https://ui-avatars.com/api/?name=XYZ+Builders&background=10b981&color=fff&size=64",
        "status": "Active", "projects": 0, "employees": 85,
        "createdAt": "2023-09-15T00:00:00.000Z",
    },
]

PROJECT_MANAGERS = ["John Doe", "Jane Smith"]

DEFAULT_PROJECTS = [
    {
        "id": "1", "name": "Residential Complex A", "code": "PRJ001",
        "company": "ABC Construction Ltd",
        "companyLogo": "https://ui-avatars.com/api/?name=ABC+Construction&background=6366f1&color=fff&size=64",
        "startDate": "2024-01-15", "endDate": "2024-12-31",
        "status": "In Progress", "progress": 65,
        "location": "123 Main Street, New York, NY 10001",
        "logo": "https://ui-avatars.com/api/?name=Residential+Complex&background=6366f1&color=fff&size=128",
        "isContractor": True, "projectManager": "John Doe",
        "createdAt": "2024-01-15T00:00:00.000Z",
    },
    {
        "id": "2", "name": "Commercial Tower B", "code": "PRJ002",
        "company": "XYZ Builders Inc",
        "companyLogo": "https://ui-avatars.com/api/?name=XYZ+Builders&background=10b981&color=fff&size=64",
        "startDate": "2024-02-20", "endDate": "2025-06-30",
        "status": "Planning", "progress": 15,
        "location": "456 Oak Avenue, Los Angeles, CA 90001",
        "logo": "https://ui-avatars.com/api/?name=Commercial+Tower&background=10b981&color=fff&size=128",
        "isContractor": False, "projectManager": "Jane Smith",
        "createdAt": "2024-02-20T00:00:00.000Z",
    },
    {
        "id": "3", "name": "Highway Infrastructure Project", "code": "PRJ003",
        "company": "ABC Construction Ltd",
        "companyLogo": "https://ui-avatars.com/api/?name=ABC+Construction&background=6366f1&color=fff&size=64",
        "startDate": "2024-03-01", "endDate": "2025-11-15",
        "status": "In Progress", "progress": 42,
        "location": "789 Business Park, Chicago, IL 60601",
        "logo": "https://ui-avatars.com/api/?name=Highway+Infrastructure&background=f59e0b&color=fff&size=128",
        "isContractor": True, "projectManager": "John Doe",
        "createdAt": "2024-03-01T00:00:00.000Z",
    },
    {
        "id": "4", "name": "Shopping Mall Development", "code": "PRJ004",
        "company": "XYZ Builders Inc",
        "companyLogo": "https://ui-avatars.com/api/?name=XYZ+Builders&background=10b981&color=fff&size=64",
        "startDate": "2024-01-10", "endDate": "2024-10-20",
        "status": "In Progress", "progress": 78,
        "location": "321 Commerce Drive, Houston, TX 77001",
        "logo": "https://ui-avatars.com/api/?name=Shopping+Mall&background=ef4444&color=fff&size=128",
        "isContractor": False, "projectManager": "Jane Smith",
        "createdAt": "2024-01-10T00:00:00.000Z",
    },
]


def _sub(id_, name, project, manager, status, progress, start, end):
    return {
        "id": id_, "name": name, "code": f"SUB{int(id_):03d}", "project": project,
        "manager": manager, "status": status, "progress": progress,
        "startDate": start, "endDate": end, "createdAt": f"{start}T00:00:00.000Z",
    }


DEFAULT_SUBPROJECTS = [
    _sub("1", "Foundation Work", "Residential Complex A", "John Doe", "Active", 85, "2024-01-20", "2024-03-15"),
    _sub("2", "Structural Framework", "Residential Complex A", "John Doe", "In Progress", 60, "2024-03-16", "2024-06-30"),
    _sub("3", "Plumbing Installation", "Residential Complex A", "Mike Johnson", "Pending", 0, "2024-07-01", "2024-08-15"),
    _sub("4", "Electrical Installation", "Commercial Tower B", "Jane Smith", "In Progress", 45, "2024-02-25", "2024-05-20"),
    _sub("5", "HVAC System", "Commercial Tower B", "Jane Smith", "Pending", 0, "2024-05-21", "2024-07-10"),
    _sub("6", "Interior Finishing", "Commercial Tower B", "Sarah Williams", "Pending", 0, "2024-07-11", "2024-09-30"),
    _sub("7", "Road Construction", "Highway Infrastructure Project", "Robert Brown", "Active", 70, "2024-03-05", "2024-08-31"),
    _sub("8", "Bridge Construction", "Highway Infrastructure Project", "Robert Brown", "In Progress", 35, "2024-04-01", "2024-10-15"),
    _sub("9", "Drainage System", "Highway Infrastructure Project", "David Lee", "Pending", 0, "2024-09-01", "2024-11-30"),
    _sub("10", "Site Preparation", "Shopping Mall Development", "Emily Davis", "Completed", 100, "2024-01-10", "2024-02-28"),
    _sub("11", "Retail Space Construction", "Shopping Mall Development", "Emily Davis", "In Progress", 55, "2024-03-01", "2024-07-31"),
    _sub("12", "Parking Structure", "Shopping Mall Development", "Chris Wilson", "In Progress", 40, "2024-03-15", "2024-08-20"),
]

DEFAULT_ROLES = [
    {"id": "1", "name": "Super Admin", "isSystemRole": True},
    {"id": "2", "name": "Project Manager", "isSystemRole": False},
    {"id": "3", "name": "Site Engineer", "isSystemRole": False},
    {"id": "4", "name": "Store Keepers", "isSystemRole": False},
    {"id": "5", "name": "Supervisor", "isSystemRole": False},
]

DEFAULT_TEAM_USERS = [
    {
        "id": "1", "name": "test", "email": "test@sitedesk.example",
        "profilePhoto": "https://ui-avatars.com/api/?name=test&background=6B8E23&color=fff&size=128",
        "contactNumber": "2365480111", "roleType": "Project Manager",
        "reportingPerson": {"name": "Rahul Rao S", "role": "Manager"}, "status": True,
    },
    {
        "id": "2", "name": "Maruti Patil", "email": "maruti.patil@sitedesk.example",
        "profilePhoto": "https://ui-avatars.com/api/?name=Maruti+Patil&background=6B8E23&color=fff&size=128",
        "contactNumber": "9822012345", "roleType": "Supervisor",
        "reportingPerson": {"name": "test", "role": "Project Manager"}, "status": True,
    },
]

DEFAULT_PERMISSIONS = [
    {"id": "1", "project": "Residential Complex A", "assignedUser": "test", "designation": "Project Manager"},
    {"id": "2", "project": "Commercial Tower B", "assignedUser": "Maruti Patil", "designation": "Supervisor"},
]


def _pr(n, project, sub_project, date):
    return {
        "id": str(n), "requestNo": f"PR-2025-{n:03d}", "userName": "Niharika",
        "project": project, "subProject": sub_project, "date": date, "status": "Approved",
    }


DEFAULT_PURCHASE_REQUESTS = [
    _pr(1, "Residential Complex A", "", "2025-08-31"),
    _pr(2, "Residential Complex A", "", "2025-09-01"),
    _pr(3, "Residential Complex A", "", "2025-09-02"),
    _pr(4, "Residential Complex A", "", "2025-09-03"),
    _pr(5, "Residential Complex A", "", "2025-09-04"),
    _pr(6, "Residential Complex A", "", "2025-09-05"),
    _pr(7, "Commercial Tower B", "HVAC System", "2025-09-10"),
    _pr(8, "Commercial Tower B", "HVAC System", "2025-09-15"),
    _pr(9, "Commercial Tower B", "HVAC System", "2025-09-20"),
    _pr(10, "Highway Infrastructure Project", "Road Construction", "2025-10-01"),
    _pr(11, "Residential Complex A", "", "2025-10-05"),
    _pr(12, "Residential Complex A", "", "2025-10-10"),
    _pr(13, "Commercial Tower B", "HVAC System", "2025-10-15"),
    _pr(14, "Highway Infrastructure Project", "Road Construction", "2025-10-20"),
    _pr(15, "Residential Complex A", "", "2025-10-25"),
    _pr(16, "Commercial Tower B", "HVAC System", "2025-10-28"),
    _pr(17, "Highway Infrastructure Project", "Road Construction", "2025-10-31"),
]

PRICING_PLANS = [
    {
        "name": "Starter", "monthlyPrice": 99, "yearlyPrice": 990, "popular": False,
        "features": ["Up to 5 users", "Document management", "Basic reporting",
                     "Email support", "Basic project tracking", "Mobile app access"],
    },
    {
        "name": "Professional", "monthlyPrice": 299, "yearlyPrice": 2990, "popular": True,
        "features": ["Up to 25 users", "All Starter features", "AI-powered tools",
                     "Priority support", "Advanced analytics", "Custom reports",
                     "API access", "Advanced security"],
    },
    {
        "name": "Enterprise", "monthlyPrice": None, "yearlyPrice": None, "popular": False,
        "features": ["Unlimited users", "All Professional features", "Custom integrations",
                     "Dedicated support", "Advanced security", "Custom training",
                     "SLA guarantee", "On-premise deployment"],
    },
]

AGENT_GREETING = (
    "Hello. I am your Supply Chain AI Agent. I am ready to assist you with demand "
    "forecasting, inventory optimization, logistics strategy, or end-to-end visibility. "
    "How can I help you optimize your operations today?"
)
