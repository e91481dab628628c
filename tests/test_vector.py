import re

from sfskit.vector import generate_vectors, main


def _handler(text, i):
    match = re.search(rf"^vector{i}:\n((?:  .*\n)+)", text, re.MULTILINE)
    assert match is not None
    return match.group(1)


def test_starts_with_header():
    text = generate_vectors()
    assert text.startswith("# handler\n.text\n.globl __alltraps\n")
    assert text.endswith("  .long vector255\n")


def test_every_vector_defined_and_listed():
    text = generate_vectors()
    for i in range(256):
        assert f".globl vector{i}\nvector{i}:\n" in text
        assert f"  .long vector{i}\n" in text
    assert "vector256" not in text


def test_error_code_traps_skip_dummy_push():
    text = generate_vectors()
    for i in range(256):
        body = _handler(text, i)
        has_dummy = body.startswith("  pushl $0\n")
        expected_dummy = not (8 <= i <= 14 or i == 17)
        assert has_dummy == expected_dummy
        assert f"  pushl ${i}\n  jmp __alltraps\n" in body


def test_syscall_vector_body():
    body = _handler(generate_vectors(), 128)
    assert body == "  pushl $0\n  pushl $128\n  jmp __alltraps\n"


def test_table_follows_handlers():
    text = generate_vectors()
    assert text.index("# vector table") > text.index("vector255:")
    assert "\n\n# vector table\n.data\n.globl __vectors\n__vectors:\n" in text


def test_main_prints_text(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out == generate_vectors()