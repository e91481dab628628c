from sfskit.linkedlist import ListEntry


def values(head):
    return [entry.value for entry in head]


def test_new_entry_is_empty():
    head = ListEntry()
    assert head.empty()
    assert list(head) == []


def test_add_before_appends_in_order():
    head = ListEntry()
    for v in range(5):
        head.add_before(ListEntry(v))
    assert values(head) == list(range(5))
    assert not head.empty()


def test_add_prepends():
    head = ListEntry()
    for v in range(4):
        head.add(ListEntry(v))
    assert values(head) == list(reversed(range(4)))


def test_add_after_middle():
    head = ListEntry()
    first, last = ListEntry("a"), ListEntry("c")
    head.add_before(first)
    head.add_before(last)
    first.add_after(ListEntry("b"))
    assert values(head) == ["a", "b", "c"]


def test_links_are_consistent():
    head = ListEntry()
    nodes = [ListEntry(v) for v in range(3)]
    for node in nodes:
        head.add_before(node)
    for entry in [head, *nodes]:
        assert entry.next.prev is entry
        assert entry.prev.next is entry


def test_remove():
    head = ListEntry()
    nodes = [ListEntry(v) for v in range(3)]
    for node in nodes:
        head.add_before(node)
    nodes[1].remove()
    assert values(head) == [0, 2]
    assert not nodes[1].empty()


def test_remove_init_makes_empty():
    head = ListEntry()
    node = ListEntry("x")
    head.add(node)
    node.remove_init()
    assert node.empty()
    assert head.empty()