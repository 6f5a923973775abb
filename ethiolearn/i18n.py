"""
UI strings for English and Amharic.
"""

from __future__ import annotations

from typing import Dict

from .models import Language

TRANSLATIONS: Dict[Language, Dict[str, str]] = {
    Language.EN: {
        "app_name": "EthioLearn AI",
        "dashboard": "Dashboard",
        "study_hub": "Study Hub",
        "quiz": "Quiz Arena",
        "ai_tutor": "AI Tutor",
        "analyzer": "Question Analyzer",
        "settings": "Settings",
        "welcome": "Welcome back, Scholar!",
        "daily_quote": "Education is the most powerful weapon which you can use to change the world.",
        "streak": "Day Streak",
        "xp": "Total XP",
        "level": "Level",
        "exam_countdown": "Days to National Exam",
        "your_plan": "Your Study Plan",
        "create_plan": "Create My Plan",
        "regenerate": "Regenerate",
        "goals": "What is your goal?",
        "weak_areas": "Weak areas (comma separated)",
        "generating": "Generating...",
        "no_plan": "No study plan yet. Tell us your goals to get started.",
        "plan_empty": "Could not generate a study plan. Please try again.",
        "minutes_by_subject": "Minutes by subject",
        "select_subject": "Select a Subject",
        "back": "← Back",
        "textbook_placeholder": (
            "This is a placeholder for the textbook content. In the real "
            "application, parsed PDF content or interactive HTML textbooks "
            "would appear here."
        ),
        "practice_prompt": "Test your knowledge with AI generated questions from this chapter.",
        "start_quiz": "Start Quiz",
        "ask_tutor": "Ask AI Tutor",
        "quiz_unavailable": "No quiz could be generated right now. Please try again.",
        "no_quiz": "No active quiz. Pick a subject in the Study Hub to start one.",
        "question_of": "Question {current} of {total}",
        "correct": "Correct!",
        "incorrect": "Incorrect.",
        "continue": "Continue",
        "quiz_complete": "Quiz Complete!",
        "your_score": "You scored {score} / {total}",
        "back_to_hub": "Back to Study Hub",
        "tutor_greeting": "Hello! I am your EthioLearn AI Tutor. How can I help you with your studies today?",
        "chat_placeholder": "Ask anything about your subjects...",
        "thinking": "Thinking...",
        "upload_question": "Paste an exam question",
        "load_sample": "Load Sample",
        "analyze": "Analyze Question",
        "analyzing": "Analyzing...",
        "analysis_failed": "The question could not be analyzed. Please try again.",
        "source": "Likely Source",
        "difficulty": "Difficulty",
        "success_rate": "Estimated Success Rate",
        "topics": "Topics",
        "similar_questions": "Similar Questions",
        "explanation": "Explanation",
        "language": "Language",
        "offline": "No Gemini API key configured. AI features will return empty results.",
    },
    Language.AM: {
        "app_name": "ኢትዮለርን AI",
        "dashboard": "ዳሽቦርድ",
        "study_hub": "የጥናት ማዕከል",
        "quiz": "የፈተና መድረክ",
        "ai_tutor": "AI አስተማሪ",
        "analyzer": "የጥያቄ ተንታኝ",
        "settings": "ቅንብሮች",
        "welcome": "እንኳን ደህና መጡ!",
        "daily_quote": "ትምህርት ዓለምን ለመለወጥ የምትጠቀምበት ኃያል መሣሪያ ነው።",
        "streak": "ተከታታይ ቀናት",
        "xp": "ጠቅላላ ነጥብ",
        "level": "ደረጃ",
        "exam_countdown": "ለብሔራዊ ፈተና የቀሩ ቀናት",
        "your_plan": "የጥናት እቅድዎ",
        "create_plan": "እቅዴን ፍጠር",
        "regenerate": "እንደገና ፍጠር",
        "goals": "ግብዎ ምንድን ነው?",
        "weak_areas": "ደካማ ጎኖች (በኮማ የተለዩ)",
        "generating": "በመፍጠር ላይ...",
        "no_plan": "እስካሁን የጥናት እቅድ የለም።",
        "plan_empty": "የጥናት እቅድ መፍጠር አልተቻለም። እባክዎ እንደገና ይሞክሩ።",
        "select_subject": "የትምህርት አይነት ይምረጡ",
        "back": "← ተመለስ",
        "textbook_placeholder": (
            "ይህ የትምህርት ይዘት ምሳሌ ነው። እውነተኛው መተግበሪያ የፒዲኤፍ (PDF) "
            "መጽሐፍትን እዚህ ያሳያል።"
        ),
        "practice_prompt": "ከዚህ ምዕራፍ የተውጣጡ ጥያቄዎችን ይሞክሩ።",
        "start_quiz": "ፈተና ጀምር",
        "ask_tutor": "AI አስተማሪን ጠይቅ",
        "quiz_unavailable": "አሁን ፈተና መፍጠር አልተቻለም። እባክዎ እንደገና ይሞክሩ።",
        "question_of": "ጥያቄ {current} ከ {total}",
        "correct": "ትክክል!",
        "incorrect": "ትክክል አይደለም።",
        "continue": "ቀጥል",
        "quiz_complete": "ፈተናው ተጠናቋል!",
        "your_score": "ውጤትዎ {score} / {total}",
        "back_to_hub": "ወደ የጥናት ማዕከል ተመለስ",
        "tutor_greeting": "ሰላም! እኔ EthioLearn AI አስተማሪ ነኝ። ስለ ትምህርትህ የምትጠይቀኝ ነገር አለ?",
        "thinking": "በማሰብ ላይ...",
        "load_sample": "ምሳሌ ጫን",
        "analyze": "ጥያቄውን ተንትን",
        "analyzing": "በመተንተን ላይ...",
        "analysis_failed": "ጥያቄውን መተንተን አልተቻለም። እባክዎ እንደገና ይሞክሩ።",
        "difficulty": "ክብደት",
        "topics": "ርዕሶች",
        "explanation": "ማብራሪያ",
        "language": "ቋንቋ",
    },
}


def t(language: Language, key: str, **kwargs) -> str:
    """Look up a UI string; falls back to English, then to the key itself."""
    text = TRANSLATIONS[language].get(key) or TRANSLATIONS[Language.EN].get(key, key)
    return text.format(**kwargs) if kwargs else text
