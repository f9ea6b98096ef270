# Section kinds understood by the field inference engine.
EDUCATION = "education"
SKILLS = "skills"
PROJECTS = "projects"

SECTION_KINDS = (EDUCATION, SKILLS, PROJECTS)

# Header synonyms that open a résumé section (matched case-insensitively).
# Longer variants come first so alternations prefer them.
SECTION_HEADERS = {
    EDUCATION: ["Academic Background", "Educations", "Education"],
    SKILLS: [
        "Technical Skills",
        "Technical Skill",
        "Qualifications",
        "Skills",
        "Skill",
    ],
    PROJECTS: ["Work Experience", "Projects", "Project"],
}

# Entity labels produced by the taggers.
PERSON_LABEL = "PERSON"
SECTION_ENTITY_LABELS = {
    EDUCATION: "EDUCATION",
    SKILLS: "SKILL",
    PROJECTS: "PROJECT",
}

# Phrase vocabularies loaded into the spaCy entity ruler, keyed by entity label.
CATEGORY_TERMS = {
    "EDUCATION": [
        "bachelor of science",
        "bachelor of arts",
        "bachelor of engineering",
        "bachelor of technology",
        "master of science",
        "master of arts",
        "master of business administration",
        "doctor of philosophy",
        "associate of arts",
        "associate of science",
        "high school diploma",
        "b.sc.",
        "m.sc.",
        "b.tech",
        "m.tech",
        "mba",
        "ph.d.",
        "phd",
        "university",
        "college",
        "institute of technology",
        "academy",
    ],
    "SKILL": [
        "python",
        "java",
        "javascript",
        "typescript",
        "react",
        "node.js",
        "angular",
        "django",
        "flask",
        "fastapi",
        "spring",
        "express",
        "sql",
        "postgresql",
        "mongodb",
        "docker",
        "kubernetes",
        "terraform",
        "aws",
        "azure",
        "gcp",
        "html",
        "css",
        "c++",
        "c#",
        ".net",
        "go",
        "rust",
        "kotlin",
        "swift",
        "ruby",
        "php",
        "pandas",
        "numpy",
        "tensorflow",
        "pytorch",
        "scikit-learn",
        "git",
        "linux",
    ],
    "PROJECT": [
        "capstone project",
        "final year project",
        "hackathon",
        "open source",
        "thesis",
        "portfolio",
    ],
}

ACCEPTED_EXTENSIONS = ("pdf", "docx")

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
