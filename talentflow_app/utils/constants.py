"""
Constants used throughout the application.
"""

# (name, stage_order, is_ai_automated, description)
DEFAULT_STAGES = [
    ('Resume Screening', 1, True, 'AI match of the resume and profile against the job requirements.'),
    ('AI Phone Interview', 2, True, 'Automated screening round scored by AI.'),
    ('Technical Assessment', 3, False, 'Live panel interview with the hiring team.'),
    ('HR Round', 4, False, 'Communication, teamwork and cultural fit.'),
    ('Viva', 5, False, 'Oral examination with subject experts.'),
    ('Final Review', 6, False, 'Comprehensive review of all previous rounds.'),
    ('Offer Stage', 7, False, 'Offer discussion with the hiring team.'),
]

# Evaluator convention: a stage is passed at or above this score
EVALUATION_PASS_SCORE = 60
# Locally scored assessments advance the candidate at or above this score
ASSESSMENT_PASS_SCORE = 50

DEFAULT_PREVIOUS_SCORE = 70

STAGE_EVALUATION_PROMPTS = {
    'Resume Screening': "Evaluate the candidate's resume and profile match with the job requirements.",
    'AI Phone Interview': (
        "Conduct a simulated AI phone screening. Evaluate communication readiness, "
        "role understanding, and initial fit based on their profile."
    ),
    'Technical Assessment': (
        "Evaluate the candidate's technical competencies based on their stated skills "
        "and experience level for the {job_title} role."
    ),
    'HR Round': 'Evaluate cultural fit, communication skills, and overall professionalism of the candidate.',
    'Viva': 'Evaluate subject depth and the ability to explain and defend answers verbally.',
    'Final Review': 'Provide a final comprehensive evaluation considering all previous stages and overall candidacy.',
    'Offer Stage': 'Confirm the candidate is ready to receive an offer based on all evaluations.',
}

# Assessment shape per stage; unknown stages use the AI Phone Interview shape
STAGE_ASSESSMENT_CONFIGS = {
    'Resume Screening': {
        'question_count': 10,
        'question_type': 'mcq',
        'time_per_question': 90,
        'prompt': (
            "Generate {count} technical MCQ questions for a {job_title} position.\n"
            "Skills required: {skills}\nRequirements: {requirements}\n\n"
            "Focus on core technical concepts, problem-solving, best practices and "
            "real-world scenarios. Make questions progressively harder from basic to advanced."
        ),
    },
    'AI Phone Interview': {
        'question_count': 10,
        'question_type': 'mcq',
        'time_per_question': 90,
        'prompt': (
            "Generate {count} MCQ questions for an automated phone screening interview for a "
            "{job_title} position.\nSkills required: {skills}\nRequirements: {requirements}\n\n"
            "Focus on role-specific knowledge, situational judgment, communication and "
            "critical thinking. Make questions progressively harder."
        ),
    },
    'HR Round': {
        'question_count': 5,
        'question_type': 'mixed',
        'time_per_question': 120,
        'prompt': (
            "Generate {count} HR assessment questions for the {job_title} position. "
            "Include a mix of MCQ and short-answer questions covering communication, "
            "teamwork, conflict resolution, motivation and cultural fit."
        ),
    },
    'Final Review': {
        'question_count': 8,
        'question_type': 'mixed',
        'time_per_question': 90,
        'prompt': (
            "Generate {count} comprehensive final round questions for the {job_title} position.\n"
            "Skills: {skills}\n\nCover technical competency, leadership potential, "
            "problem-solving approach and long-term career alignment."
        ),
    },
    'Offer Stage': {
        'question_count': 3,
        'question_type': 'text',
        'time_per_question': 180,
        'prompt': (
            "Generate {count} open-ended questions for the offer discussion stage covering "
            "salary expectations, start date availability and notice period."
        ),
    },
}
DEFAULT_ASSESSMENT_STAGE = 'AI Phone Interview'

GENERAL_MCQ_BANK = [
    {
        "question": "Which of the following best describes a key responsibility in a {job_title} role?",
        "type": "mcq",
        "options": ["Managing daily operations", "Developing technical solutions",
                    "Handling customer complaints", "All of the above depending on context"],
        "correctAnswer": 3,
        "explanation": "Role responsibilities vary based on context",
    },
    {
        "question": "What is the most effective approach to problem-solving in a professional environment?",
        "type": "mcq",
        "options": ["Jump to solutions immediately",
                    "Analyze the problem, identify root causes, then develop solutions",
                    "Wait for someone else to solve it", "Avoid the problem if possible"],
        "correctAnswer": 1,
        "explanation": "Systematic problem-solving is most effective",
    },
    {
        "question": "When working on a complex project, which is the most important first step?",
        "type": "mcq",
        "options": ["Start building immediately", "Define clear requirements and objectives",
                    "Ask a colleague to do it", "Skip planning and figure it out later"],
        "correctAnswer": 1,
        "explanation": "Clear requirements are essential for project success",
    },
    {
        "question": "What is the best practice for handling tight deadlines?",
        "type": "mcq",
        "options": ["Work overtime every day", "Prioritize tasks and communicate proactively",
                    "Compromise on quality", "Ignore less important tasks"],
        "correctAnswer": 1,
        "explanation": "Prioritization and communication are key to deadline management",
    },
    {
        "question": "In a team environment, what is the most important factor for success?",
        "type": "mcq",
        "options": ["Working independently", "Clear communication and collaboration",
                    "Competing with teammates", "Avoiding conflicts at all costs"],
        "correctAnswer": 1,
        "explanation": "Communication and collaboration drive team success",
    },
    {
        "question": "What approach should you take when learning a new technology or skill?",
        "type": "mcq",
        "options": ["Wait until someone teaches you", "Practice hands-on with documentation and projects",
                    "Only learn what's absolutely necessary", "Avoid new technologies"],
        "correctAnswer": 1,
        "explanation": "Hands-on practice is the most effective learning method",
    },
    {
        "question": "How should you handle feedback from supervisors or peers?",
        "type": "mcq",
        "options": ["Ignore it if you disagree", "Listen, reflect, and implement improvements",
                    "Argue to defend your position", "Only accept positive feedback"],
        "correctAnswer": 1,
        "explanation": "Constructive feedback helps professional growth",
    },
    {
        "question": "How do you prioritize when you have multiple urgent tasks?",
        "type": "mcq",
        "options": ["Work on the easiest task first", "Assess impact and deadlines systematically",
                    "Ask a supervisor to decide", "Try to do everything at once"],
        "correctAnswer": 1,
        "explanation": "Time management skills",
    },
    {
        "question": "What would you do if you realized you made a mistake that could affect the team?",
        "type": "mcq",
        "options": ["Hide it and hope no one notices", "Admit it immediately and work on a solution",
                    "Blame external factors", "Wait to see if it becomes a problem"],
        "correctAnswer": 1,
        "explanation": "Accountability and integrity",
    },
    {
        "question": "When faced with an unfamiliar problem, what is the best approach?",
        "type": "mcq",
        "options": ["Give up immediately", "Research, analyze, and try different solutions",
                    "Wait for instructions", "Blame external factors"],
        "correctAnswer": 1,
        "explanation": "Research and analysis help solve unfamiliar problems",
    },
]

FALLBACK_QUESTIONS = {
    'Resume Screening': GENERAL_MCQ_BANK,
    'AI Phone Interview': GENERAL_MCQ_BANK,
    'HR Round': [
        {
            "question": "Describe a situation where you had to work with a difficult team member. How did you handle it?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "medium",
            "explanation": "Conflict resolution assessment",
        },
        {
            "question": "What motivates you to apply for this position?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "medium",
            "explanation": "Motivation assessment",
        },
        {
            "question": "How do you prioritize tasks when you have multiple deadlines?",
            "type": "mcq",
            "options": ["First come, first served", "Based on urgency and importance",
                        "Whatever my manager says", "I prefer to multitask on everything"],
            "correctAnswer": 1,
            "explanation": "Time management skills",
        },
        {
            "question": "What are your salary expectations for this role?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "short",
            "explanation": "Salary expectation",
        },
        {
            "question": "Where do you see yourself in 5 years?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "medium",
            "explanation": "Career goals assessment",
        },
    ],
    'Final Review': [
        {
            "question": "What unique value would you bring to the {job_title} role?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "long",
            "explanation": "Value proposition",
        },
        {
            "question": "Describe a significant achievement in your career and what it taught you.",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "long",
            "explanation": "Achievement assessment",
        },
        {
            "question": "How do you handle feedback and criticism?",
            "type": "mcq",
            "options": ["I take it personally", "I listen, reflect, and improve",
                        "I ignore it unless from my manager", "I defend my position always"],
            "correctAnswer": 1,
            "explanation": "Growth mindset assessment",
        },
    ],
    'Offer Stage': [
        {
            "question": "What is your expected compensation package for this role?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "short",
            "explanation": "Salary expectation",
        },
        {
            "question": "What is your notice period at your current organization?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "short",
            "explanation": "Notice period",
        },
        {
            "question": "Do you have any pending offers or are you in the final stages with other companies?",
            "type": "text", "options": None, "correctAnswer": None, "expectedLength": "short",
            "explanation": "Offer status",
        },
    ],
}

# Shown in invitation emails
STAGE_FORMATS = {
    'Resume Screening': {
        'format': 'Technical MCQ Test',
        'duration': '15-20 minutes',
        'description': '10 multiple-choice questions covering technical skills and problem-solving.',
    },
    'AI Phone Interview': {
        'format': 'AI Screening Round',
        'duration': '15-20 minutes',
        'description': '10 multiple-choice questions on role knowledge and situational judgment.',
    },
    'Technical Assessment': {
        'format': 'Live Panel Interview',
        'duration': '30-45 minutes',
        'description': 'Live video interview with the hiring panel.',
    },
    'HR Round': {
        'format': 'HR Assessment',
        'duration': '10-15 minutes',
        'description': 'Questions about communication, teamwork, and cultural fit.',
    },
    'Viva': {
        'format': 'Viva Voce',
        'duration': '20-30 minutes',
        'description': 'Oral examination with subject experts.',
    },
    'Final Review': {
        'format': 'Final Evaluation',
        'duration': '10-15 minutes',
        'description': 'Comprehensive assessment combining technical and soft skills evaluation.',
    },
    'Offer Stage': {
        'format': 'Offer Discussion',
        'duration': '15-20 minutes',
        'description': 'Review and discussion of the offer details with the hiring team.',
    },
}
DEFAULT_STAGE_FORMAT = {
    'format': 'Online Assessment',
    'duration': '15-20 minutes',
    'description': 'Complete the assessment within the given time.',
}
