import random
from decimal import Decimal

from shop_client.cart_store import CartLine, CartStore, LocalCartStorage

DRILL = {"id": 1, "name": "Drill", "price": "1000.00", "image": "drill.png"}
HAMMER = {"id": 2, "name": "Claw Hammer", "price": "349.00", "image": None}


def test_add_appends_then_increments():
    cart = CartStore()
    cart.add(DRILL)
    cart.add(HAMMER)
    cart.add(DRILL)

    assert [(line.id, line.qty) for line in cart.lines] == [(1, 2), (2, 1)]
    assert cart.item_count == 3
    assert cart.total == Decimal("2349.00")


def test_decrease_removes_line_at_zero():
    cart = CartStore()
    cart.add(DRILL)
    cart.add(DRILL)

    cart.decrease(1)
    assert cart.get(1).qty == 1

    cart.decrease(1)
    assert cart.get(1) is None
    assert len(cart) == 0


def test_remove_and_clear():
    cart = CartStore()
    cart.add(DRILL)
    cart.add(DRILL)
    cart.add(HAMMER)

    cart.remove(1)
    assert [line.id for line in cart.lines] == [2]

    cart.clear()
    assert cart.lines == []
    assert cart.selected_lines() == []


def test_unknown_ids_are_noops():
    changes = []
    cart = CartStore(on_change=changes.append)
    cart.decrease(99)
    cart.remove(99)
    assert cart.lines == []
    assert changes == []


def test_quantities_stay_positive_for_random_operation_sequences():
    rng = random.Random(20261019)
    catalog = [{"id": i, "name": f"Item {i}", "price": f"{i * 10}.50"} for i in range(1, 6)]

    for _ in range(200):
        cart = CartStore()
        expected = {}
        for _ in range(40):
            product = rng.choice(catalog)
            op = rng.choice(["add", "add", "decrease", "remove"])
            if op == "add":
                cart.add(product)
                expected[product["id"]] = expected.get(product["id"], 0) + 1
            elif op == "decrease":
                cart.decrease(product["id"])
                if product["id"] in expected:
                    expected[product["id"]] -= 1
                    if expected[product["id"]] == 0:
                        del expected[product["id"]]
            else:
                cart.remove(product["id"])
                expected.pop(product["id"], None)

            assert all(line.qty >= 1 for line in cart.lines)
            assert {line.id: line.qty for line in cart.lines} == expected
            assert len({line.id for line in cart.lines}) == len(cart.lines)


def test_new_lines_are_selected_and_selection_drives_total():
    cart = CartStore()
    cart.add(DRILL)
    cart.add(DRILL)
    cart.add(HAMMER)

    assert cart.is_selected(1) and cart.is_selected(2)
    assert cart.toggle_select(2) is False
    assert [line.id for line in cart.selected_lines()] == [1]
    assert cart.selected_total() == Decimal("2000.00")

    assert cart.toggle_select(2) is True
    assert cart.toggle_select(42) is False


def test_every_mutation_notifies_and_persists(tmp_path):
    storage = LocalCartStorage(tmp_path / "cart.json")
    pushed = []
    cart = CartStore(storage=storage, on_change=pushed.append)

    cart.add(DRILL)
    cart.add(HAMMER)
    cart.decrease(2)

    assert len(pushed) == 3
    assert [line.id for line in pushed[-1]] == [1]

    reloaded = CartStore(storage=storage)
    assert [(line.id, line.qty, line.price) for line in reloaded.lines] == [(1, 1, Decimal("1000.00"))]
    assert reloaded.is_selected(1)


def test_discard_skips_the_server_hook(tmp_path):
    storage = LocalCartStorage(tmp_path / "cart.json")
    pushed = []
    cart = CartStore(storage=storage, on_change=pushed.append)
    cart.add(DRILL)
    cart.add(HAMMER)
    pushed.clear()

    cart.discard([1])

    assert pushed == []
    assert [line.id for line in CartStore(storage=storage).lines] == [2]


def test_unreadable_storage_starts_empty(tmp_path):
    path = tmp_path / "cart.json"
    path.write_text("{not json", encoding="utf-8")
    assert LocalCartStorage(path).load() == []


def test_add_accepts_existing_line():
    cart = CartStore(lines=[CartLine(id="tmp-abc", name="Old Drill", price=Decimal("10.00"), qty=1)])
    cart.add(cart.get("tmp-abc"))
    assert cart.get("tmp-abc").qty == 2
