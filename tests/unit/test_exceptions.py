from multiio import exceptions


def test_all():
    all_excs = [
        getattr(exceptions, ex)
        for ex in dir(exceptions)
        if ex.startswith("MultiIO") and ex.endswith("Error")
    ]
    assert all_excs

    for exc in all_excs:
        assert issubclass(exc, exceptions.MultiIOError)
        assert isinstance(exc.exit_code, int)
        e = exc("hello")
        assert str(e) == "hello"


def test_range_errors_are_value_errors():
    assert issubclass(exceptions.MultiIOOutOfRangeError, ValueError)
    assert issubclass(exceptions.MultiIOInvalidWhenceError, ValueError)
