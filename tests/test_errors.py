from logmonitor.errors import ConflictError, NotFoundError, StorageError


def test_not_found_message_includes_detail():
    error = NotFoundError('server "srv-missing"')
    assert str(error) == 'storage: not found: server "srv-missing"'
    assert error.detail == 'server "srv-missing"'


def test_conflict_message_without_detail():
    assert str(ConflictError()) == "storage: conflict"


def test_errors_are_storage_errors():
    error = ConflictError("log chunk number already exists")
    assert isinstance(error, StorageError)
    assert str(error) == "storage: conflict: log chunk number already exists"


def test_not_found_is_not_conflict():
    error = NotFoundError("log file")
    assert not isinstance(error, ConflictError)
    assert error.detail == "log file"
    assert str(error) == "storage: not found: log file"