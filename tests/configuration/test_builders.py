"""Tests for the fluent configuration builders and EntityConfig."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from cruddy.configuration import (
    EntityBuilder,
    EntityConfig,
    ManyToManyRelationshipBuilder,
    PropertyBuilder,
    RelationshipBuilder,
)
from cruddy.model.metadata import (
    PropertyDescriptor,
    RelationKind,
    RelationshipDescriptor,
    SortConfiguration,
)


@dataclass
class Department:
    Name: str


@dataclass
class Employee:
    Email: str
    Salary: float
    Department: Department
    Mentor: Employee | None
    Projects: list[str]
    Badge: str
    PasswordHash: str


class TestPropertyBuilder:
    def test_display_name_defaults_to_name(self) -> None:
        assert PropertyBuilder("Email").build() == PropertyDescriptor(
            name="Email", display_name="Email"
        )

    def test_chain(self) -> None:
        prop = (
            PropertyBuilder("Email")
            .has_display_name("E-mail")
            .has_placeholder("you@example.com")
            .has_help_text("Work address")
            .is_required("Email is required")
            .has_min_length(3)
            .has_max_length(320)
            .matches(r".+@.+", "Must contain @")
            .is_unique()
            .show_in_list(1)
            .show_in_form()
            .show_in_detail()
            .has_field_type("email")
            .has_format("lower")
            .build()
        )

        assert prop.display_name == "E-mail"
        assert prop.placeholder == "you@example.com"
        assert prop.help_text == "Work address"
        assert prop.is_required is True
        assert prop.required_message == "Email is required"
        assert (prop.min_length, prop.max_length) == (3, 320)
        assert prop.validation_pattern == r".+@.+"
        assert prop.validation_message == "Must contain @"
        assert prop.is_unique is True
        assert (prop.show_in_list, prop.list_order) == (True, 1)
        assert (prop.show_in_form, prop.form_order) == (True, None)
        assert prop.show_in_detail is True
        assert prop.field_type == "email"
        assert prop.format == "lower"

    def test_range_and_flags(self) -> None:
        prop = PropertyBuilder("Salary").has_range(0, 1_000_000).is_read_only().is_hidden().build()

        assert (prop.min_value, prop.max_value) == (0, 1_000_000)
        assert prop.is_read_only is True
        assert prop.is_hidden is True

    def test_unset_values_stay_default(self) -> None:
        prop = PropertyBuilder("Email").build()

        assert prop.field_type is None
        assert prop.max_length is None
        assert prop.is_required is False


class TestEntityBuilder:
    def test_entity_values(self) -> None:
        builder = (
            EntityBuilder(Employee)
            .has_display_name("Staff")
            .has_plural_name("Staff")
            .has_description("People on payroll")
            .has_icon("users")
            .has_default_sort("Salary", descending=True)
        )

        entity = builder.build().entity

        assert entity.name == "Employee"
        assert entity.type_identity is Employee
        assert entity.display_name == "Staff"
        assert entity.plural_name == "Staff"
        assert entity.description == "People on payroll"
        assert entity.icon == "users"
        assert entity.default_sort == SortConfiguration(field="Salary", descending=True)

    def test_members_discovered(self) -> None:
        discovered = EntityBuilder(Employee).build()

        assert [m.name for m in discovered.members] == [
            "Email",
            "Salary",
            "Department",
            "Mentor",
            "Projects",
            "Badge",
            "PasswordHash",
        ]

    def test_unset_entity_values_left_for_conventions(self) -> None:
        entity = EntityBuilder(Employee).build().entity

        assert entity.display_name == ""
        assert entity.plural_name == ""
        assert entity.properties == []
        assert entity.relationships == []

    def test_for_property_returns_same_builder(self) -> None:
        builder = EntityBuilder(Employee)

        first = builder.for_property("Email").is_required()
        second = builder.for_property("Email").has_max_length(100)

        assert first is second
        (prop,) = builder.build().entity.properties
        assert prop.is_required is True
        assert prop.max_length == 100

    @pytest.mark.parametrize(
        "configure",
        [
            lambda b: b.for_property("Nope"),
            lambda b: b.ignore("Nope"),
            lambda b: b.has_default_sort("Nope"),
            lambda b: b.has_many("Nope", Department),
        ],
    )
    def test_unknown_member_rejected(self, configure) -> None:
        with pytest.raises(ValueError, match="Property Nope not found on type Employee"):
            configure(EntityBuilder(Employee))

    def test_ignore(self) -> None:
        builder = EntityBuilder(Employee)

        builder.ignore("PasswordHash")
        builder.ignore("PasswordHash")

        assert builder.build().entity.ignored_property_names == ["PasswordHash"]


class TestRelationships:
    def test_kinds(self) -> None:
        builder = EntityBuilder(Employee)

        assert isinstance(builder.has_one("Department", Department), RelationshipBuilder)
        builder.has_one_to_one("Badge", "Badge")
        builder.has_many("Projects", "Project")
        assert isinstance(
            builder.has_many_to_many("Mentor", Employee), ManyToManyRelationshipBuilder
        )

        kinds = {r.name: (r.target_entity_name, r.kind) for r in builder.build().entity.relationships}
        assert kinds == {
            "Department": ("Department", RelationKind.MANY_TO_ONE),
            "Badge": ("Badge", RelationKind.ONE_TO_ONE),
            "Projects": ("Project", RelationKind.ONE_TO_MANY),
            "Mentor": ("Employee", RelationKind.MANY_TO_MANY),
        }

    def test_relationship_chain(self) -> None:
        builder = EntityBuilder(Employee)

        back = (
            builder.has_one("Department", Department)
            .with_foreign_key("DepartmentId")
            .with_inverse("Employees")
            .has_display_name("Dept")
            .has_description("Owning department")
            .is_required()
            .is_hidden()
            .show_in_list()
            .show_in_form()
            .and_()
        )

        assert back is builder
        (rel,) = builder.build().entity.relationships
        assert rel == RelationshipDescriptor(
            name="Department",
            target_entity_name="Department",
            kind=RelationKind.MANY_TO_ONE,
            foreign_key_name="DepartmentId",
            inverse_property_name="Employees",
            display_name="Dept",
            description="Owning department",
            is_required=True,
            is_hidden=True,
            show_in_list=True,
            show_in_form=True,
        )

    def test_join_table(self) -> None:
        builder = EntityBuilder(Employee)
        builder.has_many_to_many("Projects", "Project").using_join_table("EmployeeProjects").with_inverse(
            "Members"
        )

        (rel,) = builder.build().entity.relationships
        assert rel.join_table_name == "EmployeeProjects"
        assert rel.inverse_property_name == "Members"

    def test_redeclaring_replaces(self) -> None:
        builder = EntityBuilder(Employee)
        builder.has_one("Department", Department).with_foreign_key("OldId")
        builder.has_one("Department", Department)

        (rel,) = builder.build().entity.relationships
        assert rel.foreign_key_name is None


class EmployeeConfig(EntityConfig):
    entity = Employee

    def configure(self) -> None:
        self.for_entity().has_icon("user").has_one("Department", Department)
        self.for_property("Email").is_required().has_max_length(320)
        self.ignore("PasswordHash", "Badge")


class TestEntityConfig:
    def test_build(self) -> None:
        discovered = EmployeeConfig().build()

        entity = discovered.entity
        assert entity.icon == "user"
        assert [p.name for p in entity.properties] == ["Email"]
        assert [r.name for r in entity.relationships] == ["Department"]
        assert entity.ignored_property_names == ["PasswordHash", "Badge"]

    def test_build_is_fresh_each_time(self) -> None:
        config = EmployeeConfig()

        assert config.build().entity == config.build().entity
        assert len(config.build().entity.properties) == 1

    def test_default_configure_is_empty(self) -> None:
        class PlainConfig(EntityConfig):
            entity = Department

        entity = PlainConfig().build().entity

        assert entity.name == "Department"
        assert entity.properties == []

    def test_entity_required(self) -> None:
        class Unbound(EntityConfig):
            pass

        with pytest.raises(TypeError, match="Unbound does not set 'entity'"):
            Unbound()

    def test_build_uses_entity_bound_at_construction(self) -> None:
        config = EmployeeConfig()
        config.entity = None  # type: ignore[misc]

        assert config.build().entity.name == "Employee"
