from utils.vcard import ContactRecord, create_vcard, escape_text


def test_minimal_record_has_only_required_lines():
    card = create_vcard(ContactRecord(first_name="Jane", phone="+1 555 0100"))

    assert card.split("\n") == [
        "BEGIN:VCARD",
        "VERSION:3.0",
        "N:;Jane;;;",
        "FN:Jane",
        "TEL;TYPE=WORK,VOICE:+1 555 0100",
        "END:VCARD",
    ]
    for prefix in ("ORG:", "TITLE:", "EMAIL:", "ADR;TYPE=WORK:", "URL:"):
        assert prefix not in card


def test_name_lines_with_prefix_and_last_name():
    card = create_vcard(ContactRecord(prefix="Dr.", first_name="Jane", last_name="Doe"))
    lines = card.split("\n")

    assert "N:Doe;Jane;;Dr.;" in lines
    assert "FN:Dr. Jane Doe" in lines


def test_address_only_when_a_part_is_given():
    assert "ADR;TYPE=WORK:" not in create_vcard(ContactRecord(first_name="Jane"))

    card = create_vcard(ContactRecord(first_name="Jane", city="Anytown"))
    assert "ADR;TYPE=WORK:;;;Anytown;;;" in card.split("\n")


def test_full_record_line_order():
    record = ContactRecord(
        prefix="Mr.",
        first_name="John",
        last_name="Doe",
        phone="+1 123 456 7890",
        email="john.doe@email.com",
        company="ACME Inc.",
        job_title="Manager",
        street="123 Main St",
        city="Anytown",
        region="CA",
        postcode="90210",
        country="USA",
        website="https://acme.inc",
    )

    assert create_vcard(record) == "\n".join([
        "BEGIN:VCARD",
        "VERSION:3.0",
        "N:Doe;John;;Mr.;",
        "FN:Mr. John Doe",
        "ORG:ACME Inc.",
        "TITLE:Manager",
        "TEL;TYPE=WORK,VOICE:+1 123 456 7890",
        "EMAIL:john.doe@email.com",
        "ADR;TYPE=WORK:;;123 Main St;Anytown;CA;90210;USA",
        "URL:https://acme.inc",
        "END:VCARD",
    ])


def test_no_trailing_newline():
    assert create_vcard(ContactRecord(first_name="Jane")).endswith("END:VCARD")


def test_same_record_serializes_identically():
    record = ContactRecord(first_name="Jane", last_name="Doe", city="Anytown", email="j@d.org")
    assert create_vcard(record) == create_vcard(record)


def test_none_fields_never_leak_into_output():
    record = ContactRecord(first_name="Jane", last_name=None, prefix=None, phone=None, city=None)
    card = create_vcard(record)

    assert "N:;Jane;;;" in card
    for literal in ("None", "null", "undefined"):
        assert literal not in card


def test_reserved_characters_are_escaped_by_default():
    record = ContactRecord(
        first_name="Jane",
        company="Smith, Jones; Co",
        street="1 Main St\nUnit 4",
    )
    lines = create_vcard(record).split("\n")

    assert r"ORG:Smith\, Jones\; Co" in lines
    assert r"ADR;TYPE=WORK:;;1 Main St\nUnit 4;;;;" in lines


def test_escaping_can_be_turned_off():
    record = ContactRecord(first_name="Jane", company="Smith, Jones; Co")
    assert "ORG:Smith, Jones; Co" in create_vcard(record, escape=False).split("\n")


def test_escape_text_handles_backslash_first():
    assert escape_text("a\\b;c,d\r\ne") == r"a\\b\;c\,d\ne"


def test_phone_and_website_are_not_escaped():
    record = ContactRecord(first_name="Jane", phone="+1,555", website="https://x.org/?a=1;b=2")
    lines = create_vcard(record).split("\n")

    assert "TEL;TYPE=WORK,VOICE:+1,555" in lines
    assert "URL:https://x.org/?a=1;b=2" in lines
