"""Tests for apon.values."""

import copy
import pickle

from apon.values import Undefined, _Undefined, is_mapping, is_sequence


class TestUndefined:
    def test_singleton(self):
        assert Undefined is _Undefined()

    def test_falsy(self):
        assert not Undefined

    def test_repr(self):
        assert repr(Undefined) == "Undefined"

    def test_not_none(self):
        assert Undefined is not None

    def test_copy_keeps_identity(self):
        assert copy.deepcopy(Undefined) is Undefined
        assert pickle.loads(pickle.dumps(Undefined)) is Undefined


class TestContainerChecks:
    def test_mapping(self):
        assert is_mapping({})
        assert not is_mapping([])

    def test_sequence(self):
        assert is_sequence([])
        assert is_sequence(())
        assert not is_sequence("abc")
        assert not is_sequence({})
