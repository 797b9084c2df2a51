"""Fixed demo dataset used when the local store holds no collection yet."""

from lexflow.models.domain import (
    Case,
    CaseStatus,
    Client,
    ClientCategory,
    ClientStatus,
    LegalDocument,
    Task,
    TaskPriority,
    TaskStatus,
)

SEED_CLIENTS: tuple[Client, ...] = (
    Client(
        id="1",
        name="Rajesh Kumar",
        email="rajesh.k@example.com",
        phone="+91 98765 43210",
        category=ClientCategory.INDIVIDUAL,
        status=ClientStatus.ACTIVE,
        last_contact="2023-10-25",
    ),
    Client(
        id="2",
        name="TechSolutions Pvt Ltd",
        email="legal@techsolutions.com",
        phone="+91 22 1234 5678",
        category=ClientCategory.CORPORATE,
        status=ClientStatus.ACTIVE,
        last_contact="2023-10-24",
    ),
    Client(
        id="3",
        name="Amitabh Verma",
        email="a.verma@example.com",
        phone="+91 99887 76655",
        category=ClientCategory.INDIVIDUAL,
        status=ClientStatus.INACTIVE,
        last_contact="2023-09-15",
    ),
    Client(
        id="4",
        name="Green Field Estates",
        email="contact@greenfield.in",
        phone="+91 11 2233 4455",
        category=ClientCategory.CORPORATE,
        status=ClientStatus.ACTIVE,
        last_contact="2023-10-26",
    ),
)

SEED_CASES: tuple[Case, ...] = (
    Case(
        id="101",
        case_number="CIV/2023/452",
        title="Kumar vs. State of MH",
        client_id="1",
        client_name="Rajesh Kumar",
        court="Bombay High Court",
        case_type="Civil Litigation",
        status=CaseStatus.OPEN,
        next_hearing="2023-11-15",
        workplace="Other Places",
    ),
    Case(
        id="102",
        case_number="COM/2023/889",
        title="TechSolutions vs. Vendor Corp",
        client_id="2",
        client_name="TechSolutions Pvt Ltd",
        court="NCLT Mumbai",
        case_type="Corporate Dispute",
        status=CaseStatus.PENDING,
        next_hearing="2023-11-20",
        workplace="Mati court",
    ),
    Case(
        id="103",
        case_number="FAM/2022/112",
        title="Verma Divorce Petition",
        client_id="3",
        client_name="Amitabh Verma",
        court="Family Court Bandra",
        case_type="Family Law",
        status=CaseStatus.CLOSED,
        next_hearing="-",
        workplace="Kanpur Court",
    ),
    Case(
        id="104",
        case_number="RERA/2023/005",
        title="Green Field Compliance",
        client_id="4",
        client_name="Green Field Estates",
        court="MahaRERA",
        case_type="Real Estate",
        status=CaseStatus.OPEN,
        next_hearing="2023-11-05",
        workplace="Ghatampur Court",
    ),
)

SEED_TASKS: tuple[Task, ...] = (
    Task(
        id="t1",
        title="File Affidavit for Kumar Case",
        case_id="101",
        due_date="2023-11-10",
        priority=TaskPriority.HIGH,
        status=TaskStatus.IN_PROGRESS,
        assignee="Adv. Sharma",
        workplace="Other Places",
    ),
    Task(
        id="t2",
        title="Client Meeting - TechSolutions",
        case_id="102",
        due_date="2023-11-12",
        priority=TaskPriority.MEDIUM,
        status=TaskStatus.TODO,
        assignee="Adv. Sharma",
        workplace="Mati court",
    ),
    Task(
        id="t3",
        title="Draft Notice for Green Field",
        case_id="104",
        due_date="2023-11-01",
        priority=TaskPriority.HIGH,
        status=TaskStatus.DONE,
        assignee="Para. John",
        workplace="Ghatampur Court",
    ),
    Task(
        id="t4",
        title="Submit Court Fees",
        case_id="101",
        due_date="2023-11-14",
        priority=TaskPriority.LOW,
        status=TaskStatus.TODO,
        assignee="Staff Admin",
        workplace="Kanpur Court",
    ),
)

SEED_DOCUMENTS: tuple[LegalDocument, ...] = (
    LegalDocument(
        id="d1",
        name="Vakilnama_Kumar.pdf",
        file_type="PDF",
        size="1.2 MB",
        upload_date="2023-10-01",
        case_id="101",
        tags=("Vakilnama", "Legal"),
    ),
    LegalDocument(
        id="d2",
        name="Evidence_Photos.jpg",
        file_type="JPG",
        size="4.5 MB",
        upload_date="2023-10-15",
        case_id="101",
        tags=("Evidence",),
    ),
    LegalDocument(
        id="d3",
        name="Contract_Draft_v2.docx",
        file_type="DOCX",
        size="500 KB",
        upload_date="2023-10-20",
        case_id="102",
        tags=("Draft", "Contract"),
    ),
    LegalDocument(
        id="d4",
        name="Court_Order_Oct23.pdf",
        file_type="PDF",
        size="2.1 MB",
        upload_date="2023-10-25",
        case_id="104",
        tags=("Order", "Important"),
    ),
)
