"""Sample breed catalog with English and Hebrew names.

This is a starter catalog. In production, load the full breed list from
the application's data store.
"""

BREED_CATALOG = {
    "dog": [
        {"id": "dog-1", "en": "Labrador Retriever", "he": "לברדור רטריבר"},
        {"id": "dog-2", "en": "Golden Retriever", "he": "גולדן רטריבר"},
        {"id": "dog-3", "en": "German Shepherd", "he": "רועה גרמני"},
        {"id": "dog-4", "en": "Poodle", "he": "פודל"},
        {"id": "dog-5", "en": "Beagle", "he": "ביגל"},
        {"id": "dog-6", "en": "Bulldog", "he": "בולדוג"},
        {"id": "dog-7", "en": "Chihuahua", "he": "צ'יוואווה"},
        {"id": "dog-8", "en": "Siberian Husky", "he": "האסקי סיבירי"},
        {"id": "dog-9", "en": "Shih Tzu", "he": "שיצו"},
        {"id": "dog-10", "en": "Border Collie", "he": "בורדר קולי"},
        {"id": "dog-11", "en": "Canaan Dog", "he": "כלב כנעני"},
        {"id": "dog-12", "en": "Maltese", "he": "מלטזי"},
        {"id": "dog-13", "en": "Pug", "he": "פאג"},
        {"id": "dog-14", "en": "Dachshund", "he": "תחש"},
        {"id": "dog-15", "en": "Boxer", "he": "בוקסר"},
        {"id": "dog-16", "en": "Mixed Breed", "he": "גזע מעורב"},
    ],
    "cat": [
        {"id": "cat-1", "en": "Persian", "he": "פרסי"},
        {"id": "cat-2", "en": "Siamese", "he": "סיאמי"},
        {"id": "cat-3", "en": "Maine Coon", "he": "מיין קון"},
        {"id": "cat-4", "en": "British Shorthair", "he": "בריטי קצר שיער"},
        {"id": "cat-5", "en": "Ragdoll", "he": "רגדול"},
        {"id": "cat-6", "en": "Sphynx", "he": "ספינקס"},
        {"id": "cat-7", "en": "Bengal", "he": "בנגלי"},
        {"id": "cat-8", "en": "Mixed Breed", "he": "גזע מעורב"},
    ],
    "bird": [
        {"id": "bird-1", "en": "Budgerigar (Budgie)"},
        {"id": "bird-2", "en": "Cockatiel"},
        {"id": "bird-3", "en": "Canary"},
        {"id": "bird-4", "en": "Lovebird"},
        {"id": "bird-5", "en": "African Grey Parrot"},
        {"id": "bird-6", "en": "Mixed Breed", "he": "גזע מעורב"},
    ],
    "other": [
        {"id": "other-1", "en": "Mixed Breed", "he": "גזע מעורב"},
        {"id": "other-2", "en": "Unknown", "he": "לא ידוע"},
    ],
}
