import logging

from sqlalchemy.orm import Session

from specbuilder.services import store

logger = logging.getLogger(__name__)

STARTER_TEMPLATES = [
    {
        "category": "social",
        "template_data": {
            "name": "Social / Community",
            "description": "A social app where users interact with each other",
            "features": ["posts", "follows", "comments", "likes"],
            "techStack": ["auth", "database", "image storage"],
            "examples": ["Instagram", "Twitter"],
            "initialPrompt": "I want to build a social / community app like Instagram or Twitter. Users should be able to share posts, follow each other, and comment on and like posts.",
        },
    },
    {
        "category": "ecommerce",
        "template_data": {
            "name": "E-commerce / Shop",
            "description": "An online store that sells products",
            "features": ["product catalog", "cart", "checkout", "order management"],
            "techStack": ["auth", "database", "payments"],
            "examples": ["Amazon", "Rakuten"],
            "initialPrompt": "I want to build an online shop like Amazon or Rakuten, with product browsing, a cart, payments and order management.",
        },
    },
    {
        "category": "todo",
        "template_data": {
            "name": "Task management / TODO",
            "description": "A task app for keeping track of things to do",
            "features": ["create tasks", "complete tasks", "due dates", "categories"],
            "techStack": ["auth", "database", "scheduled reminders"],
            "examples": ["Todoist", "Trello"],
            "initialPrompt": "I want to build a task management / TODO app like Todoist or Trello, with creating and completing tasks, due dates and categories.",
        },
    },
    {
        "category": "business",
        "template_data": {
            "name": "Business dashboard",
            "description": "A management tool that visualizes business data",
            "features": ["charts", "reports", "team management"],
            "techStack": ["auth", "database", "charts"],
            "examples": ["Salesforce", "Notion"],
            "initialPrompt": "I want to build a business management dashboard like Salesforce or Notion, with data visualization, reporting and team management.",
        },
    },
    {
        "category": "learning",
        "template_data": {
            "name": "Learning / Education",
            "description": "An education platform that delivers learning content",
            "features": ["courses", "video lessons", "quizzes", "progress tracking"],
            "techStack": ["auth", "database", "video hosting"],
            "examples": ["Udemy", "Coursera"],
            "initialPrompt": "I want to build a learning app like Udemy or Coursera, with course management, video lessons, quizzes and progress tracking.",
        },
    },
    {
        "category": "finance",
        "template_data": {
            "name": "Household budget / Finance",
            "description": "A finance app that helps manage money",
            "features": ["income and expense log", "categories", "charts", "budgets"],
            "techStack": ["auth", "database", "charts"],
            "examples": ["Money Forward", "Zaim"],
            "initialPrompt": "I want to build a household budget app like Money Forward or Zaim, with income and expense tracking, categories, charts and budgets.",
        },
    },
]


def seed_templates(db: Session) -> int:
    """Insert the starter templates into an empty table. Returns how many rows were added."""
    if store.count_templates(db) > 0:
        return 0
    for tpl in STARTER_TEMPLATES:
        store.create_template(db, tpl["category"], dict(tpl["template_data"]))
    logger.info("[Templates] Seeded %d starter templates", len(STARTER_TEMPLATES))
    return len(STARTER_TEMPLATES)


def list_templates(db: Session, category: str = None):
    return store.get_templates(db, category)
