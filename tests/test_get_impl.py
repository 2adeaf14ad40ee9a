"""
Unit tests for get_impl and import_from in keyclaim.util.

Covers resolution from environment variables, fallback to defaults, type
validation and the keyclaim classes that are configured this way.
"""

import unittest
import os
from abc import ABC, abstractmethod
from unittest.mock import patch

from keyclaim.util import get_impl, import_from
from keyclaim.key_store import KeyStore
from keyclaim.mem.memory_key_store import MemoryKeyStore
from keyclaim.serializers.serializer import Serializer
from keyclaim.serializers.pydantic_serializer import StoreStateSerializer


class BaseTestClass:
    """Base class for testing inheritance"""


class ValidSubclass(BaseTestClass):
    """Valid subclass for testing"""


class InvalidClass:
    """Class that doesn't inherit from BaseTestClass"""


class AbstractTestClass(ABC):
    @abstractmethod
    def test_method(self):
        pass


class ConcreteTestClass(AbstractTestClass):
    def test_method(self):
        return "implemented"


class TestGetImpl(unittest.TestCase):
    """Test cases for the get_impl method"""

    def setUp(self):
        self.test_env_var = "TEST_GET_IMPL_VAR"
        self.original_value = os.environ.pop(self.test_env_var, None)

    def tearDown(self):
        os.environ.pop(self.test_env_var, None)
        if self.original_value is not None:
            os.environ[self.test_env_var] = self.original_value

    def test_get_impl_with_valid_env_var(self):
        os.environ[self.test_env_var] = "tests.test_get_impl.ValidSubclass"

        result = get_impl(self.test_env_var, BaseTestClass)

        self.assertIs(result, ValidSubclass)

    def test_get_impl_env_var_overrides_default(self):
        os.environ[self.test_env_var] = "tests.test_get_impl.ValidSubclass"

        result = get_impl(self.test_env_var, BaseTestClass, BaseTestClass)

        self.assertIs(result, ValidSubclass)

    def test_get_impl_with_standard_library_class(self):
        os.environ[self.test_env_var] = "collections.OrderedDict"

        result = get_impl(self.test_env_var, dict)

        from collections import OrderedDict

        self.assertIs(result, OrderedDict)

    def test_get_impl_fallback_to_default(self):
        result = get_impl(self.test_env_var, BaseTestClass, ValidSubclass)

        self.assertIs(result, ValidSubclass)

    def test_get_impl_empty_env_var_uses_default(self):
        os.environ[self.test_env_var] = ""

        result = get_impl(self.test_env_var, BaseTestClass, ValidSubclass)

        self.assertIs(result, ValidSubclass)

    def test_get_impl_no_env_var_no_default_raises_error(self):
        with self.assertRaises(ValueError) as context:
            get_impl(self.test_env_var, BaseTestClass)

        self.assertEqual(
            str(context.exception), f"No implementation configured for {self.test_env_var}"
        )

    def test_get_impl_whitespace_env_var_raises_error(self):
        # Whitespace is not treated as empty, so importing "   " fails
        os.environ[self.test_env_var] = "   "

        with self.assertRaises(ValueError):
            get_impl(self.test_env_var, BaseTestClass, ValidSubclass)

    def test_get_impl_invalid_module_raises_error(self):
        os.environ[self.test_env_var] = "nonexistent.module.Class"

        with self.assertRaises(ModuleNotFoundError):
            get_impl(self.test_env_var, BaseTestClass)

    def test_get_impl_invalid_class_raises_error(self):
        os.environ[self.test_env_var] = "tests.test_get_impl.NonexistentClass"

        with self.assertRaises(AttributeError):
            get_impl(self.test_env_var, BaseTestClass)

    def test_get_impl_wrong_base_type_raises_error(self):
        os.environ[self.test_env_var] = "tests.test_get_impl.InvalidClass"

        with self.assertRaises(AssertionError):
            get_impl(self.test_env_var, BaseTestClass)

    def test_get_impl_default_wrong_base_type_raises_error(self):
        with self.assertRaises(AssertionError):
            get_impl(self.test_env_var, BaseTestClass, InvalidClass)

    def test_get_impl_with_abstract_base_class(self):
        os.environ[self.test_env_var] = "tests.test_get_impl.ConcreteTestClass"

        result = get_impl(self.test_env_var, AbstractTestClass)

        self.assertIs(result, ConcreteTestClass)

    @patch("keyclaim.util.import_from")
    def test_get_impl_import_from_called_correctly(self, mock_import_from):
        mock_import_from.return_value = ValidSubclass
        os.environ[self.test_env_var] = "some.module.SomeClass"

        result = get_impl(self.test_env_var, BaseTestClass)

        mock_import_from.assert_called_once_with("some.module.SomeClass")
        self.assertIs(result, ValidSubclass)

    @patch("keyclaim.util.import_from")
    def test_get_impl_import_from_exception_propagated(self, mock_import_from):
        mock_import_from.side_effect = ImportError("Test import error")
        os.environ[self.test_env_var] = "some.module.SomeClass"

        with self.assertRaises(ImportError) as context:
            get_impl(self.test_env_var, BaseTestClass)

        self.assertEqual(str(context.exception), "Test import error")


class TestGetImplIntegration(unittest.TestCase):
    """Integration tests using actual keyclaim classes"""

    def test_import_from_key_store(self):
        result = import_from("keyclaim.mem.memory_key_store.MemoryKeyStore")

        self.assertIs(result, MemoryKeyStore)

    def test_get_impl_with_key_store(self):
        with patch.dict(
            os.environ,
            {"KEYCLAIM_KEY_STORE": "keyclaim.mem.memory_key_store.MemoryKeyStore"},
        ):
            result = get_impl("KEYCLAIM_KEY_STORE", KeyStore)

        self.assertIs(result, MemoryKeyStore)

    def test_get_impl_serializer_with_default(self):
        result = get_impl("NONEXISTENT_SERIALIZER", Serializer, StoreStateSerializer)

        self.assertIs(result, StoreStateSerializer)

    def test_get_impl_rejects_serializer_as_key_store(self):
        with patch.dict(
            os.environ,
            {
                "KEYCLAIM_KEY_STORE": (
                    "keyclaim.serializers.pydantic_serializer.StoreStateSerializer"
                )
            },
        ):
            with self.assertRaises(AssertionError):
                get_impl("KEYCLAIM_KEY_STORE", KeyStore)


if __name__ == "__main__":
    unittest.main()
