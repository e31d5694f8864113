from mockcall.core.models import FEEDBACK_CATEGORIES

QUESTIONS_SYSTEM_PROMPT = (
    "You prepare job interview questions that a voice assistant will read out loud. "
    "Reply with a JSON array of strings and nothing else."
)

QUESTIONS_PROMPT = """Prepare questions for a job interview.
The job role is {role}.
The job level is {level}.
The tech stack used in the job is {techstack}.
The amount of questions is {amount}.
The focus between behavioural and technical questions should lean towards {type}.
Please return only the questions, without any additional text.
The questions are going to be read by a voice assistant so do not use "/" or "*" or any other special characters.
Return the questions formatted like this:
["Question 1", "Question 2", "Question 3"]
"""

FEEDBACK_SYSTEM_PROMPT = (
    "You are a professional interviewer analyzing a mock interview. "
    "Your task is to evaluate the candidate based on a specific structured schema. "
    "Reply with a single JSON object and nothing else."
)

FEEDBACK_PROMPT = """You are an AI interviewer analyzing a mock interview. Evaluate the candidate based on structured categories.
Be thorough and detailed in your analysis. Don't be lenient with the candidate. If there are mistakes or areas for improvement, point them out.

Transcript:
{transcript}

Score each of these categories from 0 to 100: {categories}.
Return a JSON object with these keys:
- "categoryScores": list of {{"name": string, "score": number, "comment": string}}, one per category
- "totalScore": number, the average of the category scores
- "strengths": list of strings
- "areasForImprovement": list of strings
- "finalAssessment": string, an overall summary and recommendation
"""

CATEGORY_LIST = ", ".join(FEEDBACK_CATEGORIES)
