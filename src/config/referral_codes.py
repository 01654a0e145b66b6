from src import schemas


# Дефолтные реферальные коды, создаются при старте приложения (если их еще нет в базе)
default_referral_codes = [
    schemas.DefaultReferralCode(code="riddhima226100", owner_name="Riddhima"),
    schemas.DefaultReferralCode(code="pawan226100", owner_name="Pawan"),
    schemas.DefaultReferralCode(code="aayushmaan226100", owner_name="Aayushmaan"),
    schemas.DefaultReferralCode(code="priya226100", owner_name="Priya"),
    schemas.DefaultReferralCode(code="rahul226100", owner_name="Rahul"),
    schemas.DefaultReferralCode(code="neha226100", owner_name="Neha"),
    schemas.DefaultReferralCode(code="vikram226100", owner_name="Vikram"),
]
