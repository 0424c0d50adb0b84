"""BDD tests for loyalty units at checkout."""

from pytest_bdd import scenarios

scenarios("features/loyalty.feature")
