"""Default suggestion categories and their subcategories."""

DEFAULT_CATEGORIES = [
    {
        "name": "Project & Development",
        "description": "Suggestions related to project management, development processes, and technical improvements",
        "icon": "code",
        "color": "primary",
        "subcategories": [
            "Code Quality & Standards",
            "Development Tools & Infrastructure",
            "Project Planning & Estimation",
            "Testing & Quality Assurance",
            "Deployment & DevOps",
            "Documentation & Knowledge Sharing",
            "Performance & Optimization",
            "Security & Compliance",
        ],
    },
    {
        "name": "Management & Leadership",
        "description": "Suggestions for improving management practices, leadership skills, and organizational structure",
        "icon": "users",
        "color": "success",
        "subcategories": [
            "Team Management",
            "Communication & Transparency",
            "Decision Making Process",
            "Goal Setting & KPIs",
            "Conflict Resolution",
            "Mentoring & Coaching",
            "Strategic Planning",
            "Change Management",
        ],
    },
    {
        "name": "Team & Collaboration",
        "description": "Suggestions to enhance team dynamics, collaboration tools, and interpersonal relationships",
        "icon": "handshake",
        "color": "warning",
        "subcategories": [
            "Team Building Activities",
            "Collaboration Tools & Platforms",
            "Cross-functional Communication",
            "Remote Work & Virtual Teams",
            "Meeting Efficiency",
            "Knowledge Sharing",
            "Team Recognition & Rewards",
            "Conflict Prevention",
        ],
    },
    {
        "name": "Workplace Environment",
        "description": "Suggestions for improving physical workspace, office culture, and work-life balance",
        "icon": "home",
        "color": "ghost",
        "subcategories": [
            "Office Layout & Design",
            "Ergonomics & Health",
            "Noise & Distraction Management",
            "Lighting & Temperature",
            "Break Areas & Amenities",
            "Work-Life Balance",
            "Flexible Work Arrangements",
            "Wellness Programs",
        ],
    },
    {
        "name": "Career & Learning",
        "description": "Suggestions for professional development, training programs, and career growth opportunities",
        "icon": "graduation-cap",
        "color": "primary",
        "subcategories": [
            "Training & Workshops",
            "Skill Development Programs",
            "Certification Support",
            "Conference & Event Attendance",
            "Mentorship Programs",
            "Career Path Planning",
            "Learning Resources",
            "Performance Feedback",
        ],
    },
    {
        "name": "HR & Policy",
        "description": "Suggestions for improving HR processes, company policies, and employee benefits",
        "icon": "user-check",
        "color": "success",
        "subcategories": [
            "Recruitment & Onboarding",
            "Performance Management",
            "Compensation & Benefits",
            "Leave & Time-off Policies",
            "Employee Recognition",
            "Diversity & Inclusion",
            "Health & Safety",
            "Grievance Procedures",
        ],
    },
    {
        "name": "Innovation & New Ideas",
        "description": "Suggestions for new products, services, processes, and innovative approaches",
        "icon": "lightbulb",
        "color": "warning",
        "subcategories": [
            "Product Innovation",
            "Process Improvements",
            "Technology Adoption",
            "Market Opportunities",
            "Customer Experience",
            "Sustainability Initiatives",
            "Creative Solutions",
            "Future Trends",
        ],
    },
]
