from services.list_query import SortField, camel_to_snake, parse_filter, parse_ids, parse_list_params, parse_sort


def test_defaults():
    params = parse_list_params()
    assert params.page == 1
    assert params.per_page == 25
    assert params.skip == 0
    assert params.sort == ()
    assert params.filter == {}
    assert params.ids is None


def test_page_size_is_clamped_and_aliased():
    assert parse_list_params(per_page="1000").per_page == 100
    assert parse_list_params(per_page="0").per_page == 1
    assert parse_list_params(page_size="10").per_page == 10
    # perPage wins over pageSize
    assert parse_list_params(per_page="5", page_size="10").per_page == 5


def test_garbage_numbers_fall_back():
    params = parse_list_params(page="abc", per_page="x")
    assert params.page == 1
    assert params.per_page == 25
    assert parse_list_params(page="-3").page == 1


def test_skip_follows_page():
    params = parse_list_params(page="3", per_page="10")
    assert params.skip == 20
    assert params.take == 10


def test_parse_sort():
    assert parse_sort("-created_at,name") == (
        SortField("created_at", descending=True),
        SortField("name", descending=False),
    )
    assert parse_sort(" , -") == ()


def test_invalid_filter_is_ignored():
    assert parse_filter("{not json") == {}
    assert parse_filter("[1, 2]") == {}
    assert parse_filter('{"status": "active"}') == {"status": "active"}


def test_filter_search_feeds_q():
    assert parse_list_params(filter='{"q": " ravi "}').q == "ravi"
    assert parse_list_params(filter='{"search": "ravi"}').q == "ravi"
    assert parse_list_params(q="meera", filter='{"q": "ravi"}').q == "meera"


def test_parse_ids():
    assert parse_ids("a, b,,c") == ("a", "b", "c")
    assert parse_ids("") is None
    assert parse_ids(None) is None


def test_camel_to_snake():
    assert camel_to_snake("admissionNo") == "admission_no"
    assert camel_to_snake("dayOfWeek") == "day_of_week"
    assert camel_to_snake("status") == "status"
