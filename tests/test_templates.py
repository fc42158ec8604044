from specbuilder.services import templates


def test_seed_fills_empty_table_once(db_session):
    assert templates.seed_templates(db_session) == len(templates.STARTER_TEMPLATES)
    assert templates.seed_templates(db_session) == 0
    assert len(templates.list_templates(db_session)) == len(templates.STARTER_TEMPLATES)


def test_list_by_category(db_session):
    templates.seed_templates(db_session)

    finance = templates.list_templates(db_session, "finance")
    assert len(finance) == 1
    assert finance[0].template_data["initialPrompt"]
    assert templates.list_templates(db_session, "no-such-category") == []


def test_every_starter_has_a_first_message():
    for tpl in templates.STARTER_TEMPLATES:
        data = tpl["template_data"]
        assert set(data) >= {"name", "description", "features", "techStack", "examples", "initialPrompt"}
