"""
User-facing messages, keyed by the language the disclaimer is generated in.

Unknown languages fall back to English.
"""

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "Bengali": {
        "no_screenshot": "কোনো স্ক্রিনশট প্রদান করা হয়নি।",
        "invalid_format": 'অবৈধ চিত্রের ডেটা ইউআরআই ফর্ম্যাট। "data:image/" দিয়ে শুরু হতে হবে।',
        "not_a_chart": (
            "শুধুমাত্র বাইনারি চার্টের স্ক্রিনশট আপলোড করুন (যেমন Quotex)। "
            "অন্য কোনো ছবি (মানুষ, বস্তু ইত্যাদি) গ্রহণ করা হবে না।"
        ),
        "no_prediction": (
            "AI বিশ্লেষণ একটি বৈধ চার্টের জন্য পূর্বাভাস দিতে ব্যর্থ হয়েছে৷ "
            "অনুগ্রহপূর্বক আবার চেষ্টা করুন."
        ),
        "unexpected": "একটি অপ্রত্যাশিত সার্ভার ত্রুটি ঘটেছে: {error}",
        "unknown_error": "অজানা ত্রুটি",
        "disclaimer_fallback": "ঝুঁকি সতর্কতা তৈরি করা যায়নি। অনুগ্রহ করে দায়িত্বের সাথে ট্রেড করুন।",
        "user_id_required": "ব্যবহারকারী আইডি প্রয়োজন",
        "password_required": "পাসওয়ার্ড প্রয়োজন",
        "invalid_credentials": "অবৈধ ব্যবহারকারী আইডি বা পাসওয়ার্ড।",
        "auth_error": "প্রমাণীকরণের সময় একটি ত্রুটি ঘটেছে।",
    },
    "English": {
        "no_screenshot": "No screenshot was provided.",
        "invalid_format": 'Invalid image data URI format. It must start with "data:image/".',
        "not_a_chart": (
            "Please upload a screenshot of a binary options chart only (e.g. Quotex). "
            "Other images (people, objects, etc.) are not accepted."
        ),
        "no_prediction": "The AI analysis failed to produce a prediction for a valid chart. Please try again.",
        "unexpected": "An unexpected server error occurred: {error}",
        "unknown_error": "unknown error",
        "disclaimer_fallback": "The risk disclaimer could not be generated. Please trade responsibly.",
        "user_id_required": "User ID is required",
        "password_required": "Password is required",
        "invalid_credentials": "Invalid user ID or password.",
        "auth_error": "An error occurred during authentication.",
    },
}


def messages_for(language: str) -> Dict[str, str]:
    return MESSAGES.get(language, MESSAGES["English"])
