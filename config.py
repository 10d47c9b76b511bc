"""Configuration for the EmoTeach emotion-adaptive lesson engine"""

# --- Model Settings ---
YOLO_FACE_MODEL = "yolov8n-face-keypoints.pt"   # Face-specific YOLOv8 detector
YOLO_CONFIDENCE = 0.5                            # Minimum face detection confidence
EMOTION_INPUT_SIZE = (48, 48)                    # FER model's native input size

# --- Video Capture ---
CAMERA_INDEX = 0
FRAME_WIDTH = 320
FRAME_HEIGHT = 240

# --- Sampling ---
SAMPLE_INTERVAL_SECONDS = 1.0                    # one classification per second

# --- Adaptation Thresholds ---
CONFIDENCE_THRESHOLD = 60                        # percent; below this a sample is ignored
EMOTION_DISPLAY_THRESHOLD = 50                   # percent; indicator shows "Detecting..." at or below
ADAPTATION_COOLDOWN_SECONDS = 10.0               # between negative-emotion transitions only

# --- Progress ---
MARK_COMPLETE_DELTA = 10
QUIZ_COMPLETION_DELTA = 25
MAX_PROGRESS = 100

# --- Emotion Vocabulary ---
EMOTION_LABELS = ("happy", "sad", "angry", "fearful", "disgusted", "surprised", "neutral")

# DeepFace / FER short names -> classifier vocabulary
EMOTION_ALIASES = {
    "fear": "fearful",
    "disgust": "disgusted",
    "surprise": "surprised",
}

# "confused" and "excited" only arrive from richer classifiers
CONFUSED_EMOTIONS = frozenset({"fearful", "sad", "confused"})
FRUSTRATED_EMOTIONS = frozenset({"angry", "disgusted"})
POSITIVE_EMOTIONS = frozenset({"happy", "surprised", "excited"})

EMOTION_EMOJI = {
    "happy": "\U0001F60A",
    "sad": "\U0001F622",
    "angry": "\U0001F620",
    "fearful": "\U0001F628",
    "disgusted": "\U0001F922",
    "surprised": "\U0001F632",
    "neutral": "\U0001F610",
}
UNKNOWN_EMOJI = "\U0001F914"

# --- Guidance Text ---
CONFUSED_REASON = "I noticed you might be feeling confused. Let me explain this more simply!"
CONFUSED_MESSAGE = "Don't worry! Learning new things can be tricky. Let's break it down step by step."
FRUSTRATED_REASON = "I see you might be frustrated. How about a fun interactive quiz to re-engage?"
FRUSTRATED_MESSAGE = "Let's try something interactive! Sometimes a quick quiz helps us feel more confident."
POSITIVE_REASON = "Great! You seem engaged. Keep up the excellent work!"
POSITIVE_MESSAGE = "You're doing amazing! Your positive energy is wonderful to see."
SIMPLIFY_REQUEST_REASON = "You requested a simpler explanation"
SIMPLIFY_REQUEST_MESSAGE = "No problem! Here's a simpler way to understand this."
QUIZ_COMPLETED_MESSAGE = "Quiz completed! You got {score} out of {total} correct!"
DEFAULT_BANNER_MESSAGE = POSITIVE_MESSAGE

# --- Extra examples shown alongside the simplified explanation ---
EXTRA_EXAMPLES = [
    "If you have 8 crayons and use 3, you used 3/8 of them",
    "If you read 5 pages out of a 10-page book, you read 5/10 = 1/2",
    "If you eat 1 out of 3 cookies, you ate 1/3 of the cookies",
]

# --- Sample Lessons ---
SAMPLE_LESSONS = [
    {
        "id": "1",
        "title": "Introduction to Fractions",
        "description": "Learn the basics of fractions with visual examples",
        "category": "Mathematics",
        "full_text": "A fraction represents a part of a whole. When we write 1/2, "
                     "we mean one part out of two equal parts.",
        "simplified_text": "A fraction is like a piece of a pie! If you cut a pie into 2 equal "
                           "pieces and take 1 piece, you have 1/2 of the pie.",
        "hints": [
            "Think of fractions like pizza slices",
            "The bottom number shows how many pieces total",
            "The top number shows how many pieces you have",
        ],
    },
    {
        "id": "2",
        "title": "Adding Fractions",
        "description": "Master the art of adding fractions together",
        "category": "Mathematics",
        "full_text": "To add fractions with the same denominator, simply add the numerators "
                     "and keep the denominator the same.",
        "simplified_text": "When fractions have the same bottom number, just add the top numbers! "
                           "Like 1/4 + 2/4 = 3/4.",
        "hints": [
            "Only add the top numbers",
            "Keep the bottom number the same",
            "Check if your answer can be simplified",
        ],
    },
    {
        "id": "3",
        "title": "Equivalent Fractions",
        "description": "Understand how different fractions can represent the same value",
        "category": "Mathematics",
        "full_text": "Equivalent fractions are fractions that represent the same value, like 1/2 and 2/4.",
        "simplified_text": "Some fractions look different but mean the same thing! Like 1/2 is the "
                           "same as 2/4 - they're both half!",
        "hints": [
            "Multiply or divide top and bottom by the same number",
            "1/2 = 2/4 = 3/6",
            "Draw pictures to see they're equal",
        ],
    },
]

# --- Quiz Bank ---
FRACTION_QUIZ = [
    {
        "prompt": "If you eat 2 slices out of 8 pizza slices, what fraction did you eat?",
        "options": ["1/4", "2/8", "1/2", "3/4"],
        "correct_option_index": 1,
        "explanation": "Great! 2 out of 8 slices is 2/8. You can also say 1/4 since 2/8 = 1/4!",
    },
    {
        "prompt": "Which fraction is bigger: 1/2 or 1/4?",
        "options": ["1/4", "1/2", "They're the same", "Can't tell"],
        "correct_option_index": 1,
        "explanation": "Excellent! 1/2 means half, while 1/4 means one quarter. "
                       "Half is bigger than a quarter!",
    },
    {
        "prompt": "If you drink 3/4 of your juice, how much is left?",
        "options": ["1/4", "1/2", "3/4", "Nothing"],
        "correct_option_index": 0,
        "explanation": "Perfect! If you drink 3/4, then 1/4 is left. "
                       "Together they make the whole: 3/4 + 1/4 = 4/4 = 1 whole!",
    },
]
