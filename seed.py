import logging

from sqlalchemy.exc import OperationalError

from models import Course, Project, User, db

log = logging.getLogger(__name__)

COURSES = [
    {
        "title": "CS50's Introduction to Computer Science",
        "description": "Harvard's introduction to the intellectual enterprises of computer science and the art of programming.",
        "platform": "edX",
        "url": "https://www.edx.org/cs50",
        "instructor": "David J. Malan",
        "duration": "12 weeks",
        "level": "Beginner",
        "skills": ["C", "Python", "SQL", "Algorithms"],
        "is_free": True,
        "rating": "4.9",
    },
    {
        "title": "Responsive Web Design Certification",
        "description": "Learn HTML and CSS by building real projects, from a cat photo app to a personal portfolio.",
        "platform": "freeCodeCamp",
        "url": "https://www.freecodecamp.org/learn/2022/responsive-web-design/",
        "instructor": "freeCodeCamp",
        "duration": "300 hours",
        "level": "Beginner",
        "skills": ["HTML", "CSS", "Responsive Design"],
        "is_free": True,
        "rating": "4.8",
    },
    {
        "title": "JavaScript Algorithms and Data Structures",
        "description": "Learn the fundamentals of JavaScript and practise them on algorithm challenges.",
        "platform": "freeCodeCamp",
        "url": "https://www.freecodecamp.org/learn/javascript-algorithms-and-data-structures/",
        "instructor": "freeCodeCamp",
        "duration": "300 hours",
        "level": "Beginner",
        "skills": ["JavaScript", "Algorithms", "Data Structures"],
        "is_free": True,
        "rating": "4.8",
    },
    {
        "title": "React - The Complete Guide",
        "description": "Dive in and learn React from the ground up, including hooks, routing and state management.",
        "platform": "Udemy",
        "url": "https://www.udemy.com/course/react-the-complete-guide-incl-redux/",
        "instructor": "Maximilian Schwarzmuller",
        "duration": "68 hours",
        "level": "Intermediate",
        "skills": ["React", "JavaScript", "Redux"],
        "is_free": False,
        "rating": "4.6",
    },
    {
        "title": "Google Data Analytics Professional Certificate",
        "description": "Prepare for an entry-level data analyst role with spreadsheets, SQL, Tableau and R.",
        "platform": "Coursera",
        "url": "https://www.coursera.org/professional-certificates/google-data-analytics",
        "instructor": "Google Career Certificates",
        "duration": "6 months",
        "level": "Beginner",
        "skills": ["SQL", "Excel", "Data Visualization", "Tableau"],
        "is_free": False,
        "rating": "4.8",
    },
    {
        "title": "Machine Learning Specialization",
        "description": "Build machine learning models in Python using NumPy and scikit-learn.",
        "platform": "Coursera",
        "url": "https://www.coursera.org/specializations/machine-learning-introduction",
        "instructor": "Andrew Ng",
        "duration": "3 months",
        "level": "Intermediate",
        "skills": ["Python", "Machine Learning", "Statistics"],
        "is_free": False,
        "rating": "4.9",
    },
    {
        "title": "Node.js and Express Full Course",
        "description": "Build REST APIs with Node.js and Express, covering routing, middleware and databases.",
        "platform": "YouTube",
        "url": "https://www.youtube.com/watch?v=Oe421EPjeBE",
        "instructor": "freeCodeCamp.org",
        "duration": "8 hours",
        "level": "Intermediate",
        "skills": ["Node.js", "Express", "REST APIs"],
        "is_free": True,
        "rating": "4.7",
    },
    {
        "title": "System Design for Beginners",
        "description": "Understand how large scale systems are designed: load balancing, caching, sharding and queues.",
        "platform": "YouTube",
        "url": "https://www.youtube.com/watch?v=MbjObHmDbZo",
        "instructor": "freeCodeCamp.org",
        "duration": "1 hour",
        "level": "Advanced",
        "skills": ["Architecture", "Scalability", "Performance Optimization"],
        "is_free": True,
        "rating": "4.6",
    },
]

PROJECTS = [
    {
        "title": "Personal Portfolio Website",
        "description": "A responsive site that introduces you, lists your projects and links to your profiles.",
        "difficulty": "Easy",
        "skills": ["HTML", "CSS", "Responsive Design"],
        "github_url": "https://github.com/topics/portfolio-website",
        "phase": "Beginner",
        "estimated_time": "1 week",
    },
    {
        "title": "Todo App with Local Storage",
        "description": "Create, edit and complete tasks, persisting them in the browser.",
        "difficulty": "Easy",
        "skills": ["JavaScript", "DOM", "Local Storage"],
        "github_url": "https://github.com/topics/todo-app",
        "phase": "Beginner",
        "estimated_time": "3-5 days",
    },
    {
        "title": "Sales Data Dashboard",
        "description": "Clean a public sales dataset with SQL and present the findings in an interactive dashboard.",
        "difficulty": "Medium",
        "skills": ["SQL", "Python", "Data Visualization"],
        "github_url": "https://github.com/topics/data-dashboard",
        "phase": "Intermediate",
        "estimated_time": "2 weeks",
    },
    {
        "title": "REST API with Authentication",
        "description": "A JSON API with user registration, login and per-user resources backed by a database.",
        "difficulty": "Medium",
        "skills": ["Node.js", "REST APIs", "SQL", "Authentication"],
        "github_url": "https://github.com/topics/rest-api",
        "phase": "Intermediate",
        "estimated_time": "2 weeks",
    },
    {
        "title": "Real-time Chat Application",
        "description": "Rooms, presence and message history over WebSockets, deployed to the cloud.",
        "difficulty": "Hard",
        "skills": ["React", "WebSockets", "Node.js", "Deployment"],
        "github_url": "https://github.com/topics/chat-application",
        "phase": "Advanced",
        "estimated_time": "3-4 weeks",
    },
    {
        "title": "Churn Prediction Model",
        "description": "Train, evaluate and serve a model that predicts customer churn from usage data.",
        "difficulty": "Hard",
        "skills": ["Python", "Machine Learning", "Statistics"],
        "github_url": "https://github.com/topics/churn-prediction",
        "phase": "Advanced",
        "estimated_time": "3 weeks",
    },
]


def seed_catalog() -> bool:
    """Insert the course and project catalog when both tables are empty."""
    try:
        has_catalog = Course.query.first() is not None or Project.query.first() is not None
    except OperationalError:
        # If the table shape changed in old DB, try to create_all again
        db.create_all()
        has_catalog = Course.query.first() is not None or Project.query.first() is not None

    if has_catalog:
        return False

    db.session.add_all(Course(**c) for c in COURSES)
    db.session.add_all(Project(**p) for p in PROJECTS)
    db.session.commit()
    log.info("Seeded %d courses and %d projects", len(COURSES), len(PROJECTS))
    return True


if __name__ == "__main__":
    from app import create_app

    app = create_app()
    with app.app_context():
        db.create_all()
        seed_catalog()

        if not User.query.filter_by(email="demo@skillwise.dev").first():
            u = User(name="Demo User", email="demo@skillwise.dev"); u.set_password("demo123")
            db.session.add(u)
            db.session.commit()
        print("Seed complete.")
