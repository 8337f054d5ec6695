from sipspot.ui.components.pagination import page_window


def test_page_window():
    assert page_window(1, 1) == [1]
    assert page_window(1, 0) == [1]
    assert page_window(1, 2) == [1, 2]
    assert page_window(3, 5) == [1, 2, 3, 4, 5]
    assert page_window(6, 12) == [1, None, 4, 5, 6, 7, 8, None, 12]
    assert page_window(1, 12) == [1, 2, 3, None, 12]
    assert page_window(12, 12) == [1, None, 10, 11, 12]
    assert page_window(99, 12) == [1, None, 10, 11, 12]
