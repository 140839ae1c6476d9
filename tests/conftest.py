# Shared HL7 v2 sample messages for the test suite.
import pytest


SIMPLE_MESSAGE = (
    "MSH|^~\\&|SENDING|FACILITY|RECEIVING|FACILITY|20231215120000||ADT^A01|MSG001|P|2.5\r"
    "PID|1||12345^^^MRN||DOE^JOHN^Q||19800115|M"
)

ALL_DELIMITERS_MESSAGE = (
    "MSH|^~\\&|SEND|FAC|RECV|FAC|20231215||ADT^A01|123|P|2.5\r"
    "PID|1||12345||DOE^JOHN&JR~SMITH^JANE&SR||19800101|M\r"
    "OBX|1|NM|HEIGHT||180|cm|150-200|N|||F"
)

COMPLEX_MESSAGE = (
    "MSH|^~\\&|LAB|FACILITY|EHR|FACILITY|20231215140000||ORU^R01|LAB123456|P|2.5\n"
    "PID|1||PATIENT123^^^HOSP^MR||SMITH^JOHN^A^III||19850315|M|||"
    "123 MAIN ST^APT 4^ANYTOWN^CA^12345^USA||5551234567^HOME~5559876543^CELL"
    "||EN|M|CAT||123456789|DL12345678\n"
    "OBR|1|ORDER123|ACCN456|CBC^COMPLETE BLOOD COUNT^L|||20231215100000|||||||"
    "20231215103000||JONES^MARY^DR|||||20231215140000|||F\n"
    "OBX|1|NM|WBC^WHITE BLOOD CELL COUNT^L||7.5|10*3/uL|4.5-11.0|N|||F\n"
    "OBX|2|NM|RBC^RED BLOOD CELL COUNT^L||4.8|10*6/uL|4.5-5.5|N|||F\n"
    "OBX|3|NM|HGB^HEMOGLOBIN^L||14.2|g/dL|13.5-17.5|N|||F"
)


@pytest.fixture
def simple_message_text():
    return SIMPLE_MESSAGE


@pytest.fixture
def all_delimiters_text():
    return ALL_DELIMITERS_MESSAGE


@pytest.fixture
def complex_message_text():
    return COMPLEX_MESSAGE


@pytest.fixture(params=["simple", "all_delimiters", "complex"])
def sample_text(request):
    return {
        "simple": SIMPLE_MESSAGE,
        "all_delimiters": ALL_DELIMITERS_MESSAGE,
        "complex": COMPLEX_MESSAGE,
    }[request.param]
