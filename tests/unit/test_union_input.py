from graphql import GraphQLInputField, GraphQLInputObjectType, GraphQLInt, GraphQLList, GraphQLNonNull, GraphQLString

from restgraph.core.union_input import is_one_of_input_type, resolve_data_by_union_input_type

CatInput = GraphQLInputObjectType("CatInput", {
    "name": GraphQLInputField(GraphQLString),
    "lives": GraphQLInputField(GraphQLInt),
})
DogInput = GraphQLInputObjectType("DogInput", {
    "name": GraphQLInputField(GraphQLString),
    "goodBoy": GraphQLInputField(GraphQLString, extensions={"propertyName": "good-boy"}),
})
PetInput = GraphQLInputObjectType(
    "PetInput",
    {"cat": GraphQLInputField(CatInput), "dog": GraphQLInputField(DogInput)},
    extensions={"oneOf": True},
)
OwnerInput = GraphQLInputObjectType("OwnerInput", {
    "firstName": GraphQLInputField(GraphQLString, extensions={"propertyName": "first_name"}),
    "pets": GraphQLInputField(GraphQLList(PetInput)),
})


def test_one_of_detection():
    assert is_one_of_input_type(PetInput)
    assert not is_one_of_input_type(OwnerInput)


def test_one_of_input_unwraps_member_payload():
    result = resolve_data_by_union_input_type({"dog": {"name": "Rex", "goodBoy": "yes"}}, GraphQLNonNull(PetInput))

    assert result == {"name": "Rex", "good-boy": "yes"}


def test_property_names_and_nested_lists():
    data = {"firstName": "Ada", "pets": [{"cat": {"name": "Tom"}}, {"dog": {"name": "Rex"}}]}

    result = resolve_data_by_union_input_type(data, OwnerInput)

    assert result == {"first_name": "Ada", "pets": [{"name": "Tom"}, {"name": "Rex"}]}


def test_input_is_not_modified():
    data = {"firstName": "Ada"}

    resolve_data_by_union_input_type(data, OwnerInput)

    assert data == {"firstName": "Ada"}


def test_unknown_keys_pass_through():
    assert resolve_data_by_union_input_type({"extra": 1}, OwnerInput) == {"extra": 1}


def test_scalars_and_missing_types_pass_through():
    assert resolve_data_by_union_input_type("text", GraphQLString) == "text"
    assert resolve_data_by_union_input_type({"a": 1}, None) == {"a": 1}
    assert resolve_data_by_union_input_type(None, OwnerInput) is None


def test_list_data_for_object_type_uses_first_item():
    assert resolve_data_by_union_input_type([{"firstName": "Ada"}, {"firstName": "Bob"}], OwnerInput) == {
        "first_name": "Ada",
    }


def test_single_value_for_list_type_is_wrapped():
    assert resolve_data_by_union_input_type({"cat": {"lives": 9}}, GraphQLList(PetInput)) == [{"lives": 9}]
